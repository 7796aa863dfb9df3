from __future__ import annotations

from datetime import datetime
import json
import logging

from fastapi import Depends, FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from sqlalchemy import desc
from sqlalchemy.orm import Session

from ybsports.chat.relay import ChatRelay, build_message
from ybsports.db import Base, engine, get_db
from ybsports.models import Comment, Game, Post, User
from ybsports.schedule.errors import ConfigError, ScheduleError
from ybsports.schedule.filters import parse_date_param, parse_month_param
from ybsports.schedule.schema import NormalizedGame
from ybsports.schedule.service import load_extracted, load_schedule, today_local
from ybsports.schemas import (
    CommentOut,
    ExtractedGamesResponse,
    PostOut,
    PostSummaryOut,
    StoredGameOut,
    UserOut,
)
from ybsports.security import hash_password, verify_password
from ybsports.settings import get_settings

settings = get_settings()
app = FastAPI(title="YB Sports Backend")
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)
logger = logging.getLogger(__name__)
chat_relay = ChatRelay(history_size=settings.chat_history_size)

MISSING_FIELDS = "필수 값이 비어 있습니다."
POST_NOT_FOUND = "게시글을 찾을 수 없습니다."
COMMENT_NOT_FOUND = "댓글을 찾을 수 없습니다."
PASSWORD_MISMATCH = "비밀번호가 일치하지 않습니다."
POPULAR_LIMIT = 5


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


@app.on_event("startup")
def on_startup() -> None:
    configure_logging()
    Base.metadata.create_all(bind=engine)
    logger.info("YB Sports backend starting source=%s", settings.kbo_source)


def _require(payload: dict, *fields: str, detail: str = MISSING_FIELDS) -> list:
    values = [payload.get(field) for field in fields]
    if any(value is None or (isinstance(value, str) and not value.strip()) for value in values):
        raise HTTPException(status_code=400, detail=detail)
    return values


def _get_post_or_404(db: Session, post_id: int) -> Post:
    post = db.query(Post).filter(Post.id == post_id).one_or_none()
    if not post:
        raise HTTPException(status_code=404, detail=POST_NOT_FOUND)
    return post


@app.get("/", response_class=PlainTextResponse)
def home() -> str:
    return "YB Sports Backend Running!"


# ── Auth / users ────────────────────────────────────────────────────────


@app.post("/api/register", status_code=201)
def register(payload: dict, db: Session = Depends(get_db)):
    username, password, nickname = _require(payload, "username", "password", "nickname")

    existing = db.query(User).filter(User.username == username).one_or_none()
    if existing:
        raise HTTPException(status_code=409, detail="이미 존재하는 아이디입니다.")

    db.add(User(username=username, password=hash_password(password), nickname=nickname, intro=""))
    db.commit()
    logger.info("Registered user username=%s", username)
    return {"message": "회원가입 완료"}


@app.post("/api/login")
def login(payload: dict, db: Session = Depends(get_db)):
    username, password = _require(
        payload, "username", "password", detail="아이디와 비밀번호를 입력하세요."
    )

    user = db.query(User).filter(User.username == username).one_or_none()
    if not user:
        raise HTTPException(status_code=401, detail="존재하지 않는 아이디입니다.")
    if not verify_password(password, user.password):
        raise HTTPException(status_code=401, detail="비밀번호가 올바르지 않습니다.")

    return {
        "message": "로그인 성공",
        "user": {"id": user.id, "username": user.username, "nickname": user.nickname},
    }


@app.get("/api/user/info", response_model=UserOut)
def user_info(username: str | None = None, db: Session = Depends(get_db)):
    if not username:
        raise HTTPException(status_code=400, detail="username이 필요합니다.")
    user = db.query(User).filter(User.username == username).one_or_none()
    if not user:
        raise HTTPException(status_code=404, detail="사용자를 찾을 수 없습니다.")
    return UserOut.model_validate(user)


@app.put("/api/user/password")
def change_password(payload: dict, db: Session = Depends(get_db)):
    username, old_password, new_password = _require(
        payload, "username", "oldPassword", "newPassword", detail="필수 정보가 부족합니다."
    )

    user = db.query(User).filter(User.username == username).one_or_none()
    if not user or not verify_password(old_password, user.password):
        raise HTTPException(status_code=400, detail="현재 비밀번호가 일치하지 않습니다.")

    user.password = hash_password(new_password)
    db.commit()
    return {"message": "비밀번호가 변경되었습니다."}


@app.delete("/api/user/delete")
def delete_user(payload: dict, db: Session = Depends(get_db)):
    username, password = _require(payload, "username", "password", detail="필수 정보가 부족합니다.")

    user = db.query(User).filter(User.username == username).one_or_none()
    if not user or not verify_password(password, user.password):
        raise HTTPException(status_code=400, detail=PASSWORD_MISMATCH)

    db.delete(user)
    db.commit()
    logger.info("Deleted user username=%s", username)
    return {"message": "회원 탈퇴가 완료되었습니다."}


@app.put("/api/user/profile")
def update_profile(payload: dict, db: Session = Depends(get_db)):
    (username,) = _require(payload, "username", detail="username이 필요합니다.")

    user = db.query(User).filter(User.username == username).one_or_none()
    if not user:
        raise HTTPException(status_code=404, detail="사용자를 찾을 수 없습니다.")

    user.intro = payload.get("intro") or ""
    user.profile_image = payload.get("profileImage") or None
    db.commit()
    return {"message": "프로필이 업데이트되었습니다."}


# ── Posts ───────────────────────────────────────────────────────────────


@app.get("/api/posts", response_model=list[PostOut])
def list_posts(db: Session = Depends(get_db)):
    posts = db.query(Post).order_by(desc(Post.id)).all()
    return [PostOut.model_validate(post) for post in posts]


@app.get("/api/posts/popular", response_model=list[PostSummaryOut])
def popular_posts(db: Session = Depends(get_db)):
    posts = (
        db.query(Post)
        .order_by(desc(Post.likes), desc(Post.views), desc(Post.id))
        .limit(POPULAR_LIMIT)
        .all()
    )
    return [PostSummaryOut.model_validate(post) for post in posts]


@app.post("/api/posts", status_code=201)
def create_post(payload: dict, db: Session = Depends(get_db)):
    title, content, writer, password = _require(payload, "title", "content", "writer", "password")

    post = Post(
        title=title,
        content=content,
        writer=writer,
        password=hash_password(password),
        views=0,
        likes=0,
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    return {"message": "게시글이 등록되었습니다.", "postId": post.id}


@app.get("/api/posts/{post_id}", response_model=PostOut)
def get_post(post_id: int, db: Session = Depends(get_db)):
    post = _get_post_or_404(db, post_id)
    post.views = (post.views or 0) + 1
    db.commit()
    db.refresh(post)
    return PostOut.model_validate(post)


@app.put("/api/posts/{post_id}")
def update_post(post_id: int, payload: dict, db: Session = Depends(get_db)):
    title, content, password = _require(payload, "title", "content", "password")

    post = _get_post_or_404(db, post_id)
    if not verify_password(password, post.password):
        raise HTTPException(status_code=403, detail=PASSWORD_MISMATCH)

    post.title = title
    post.content = content
    db.commit()
    return {"message": "게시글이 수정되었습니다."}


@app.delete("/api/posts/{post_id}")
def delete_post(post_id: int, payload: dict, db: Session = Depends(get_db)):
    (password,) = _require(payload, "password", detail="비밀번호를 입력해주세요.")

    post = _get_post_or_404(db, post_id)
    if not verify_password(password, post.password):
        raise HTTPException(status_code=403, detail=PASSWORD_MISMATCH)

    db.query(Comment).filter(Comment.post_id == post.id).delete(synchronize_session=False)
    db.delete(post)
    db.commit()
    return {"message": "게시글이 삭제되었습니다."}


@app.post("/api/posts/{post_id}/like")
def like_post(post_id: int, db: Session = Depends(get_db)):
    post = _get_post_or_404(db, post_id)
    post.likes = (post.likes or 0) + 1
    db.commit()
    return {"message": "좋아요!", "likes": post.likes}


# ── Comments ────────────────────────────────────────────────────────────


def _comment_out(comment: Comment) -> CommentOut:
    return CommentOut(
        id=comment.id,
        post_id=comment.post_id,
        parentId=comment.parent_id,
        writer=comment.writer,
        content=comment.content,
        created_at=comment.created_at,
    )


@app.get("/api/comments/{post_id}", response_model=list[CommentOut])
def list_comments(post_id: int, db: Session = Depends(get_db)):
    comments = (
        db.query(Comment)
        .filter(Comment.post_id == post_id)
        .order_by(Comment.id.asc())
        .all()
    )
    return [_comment_out(comment) for comment in comments]


@app.post("/api/comments", status_code=201)
def create_comment(payload: dict, db: Session = Depends(get_db)):
    post_id, writer, content, password = _require(
        payload, "postId", "writer", "content", "password"
    )
    post = _get_post_or_404(db, post_id)

    parent_id = payload.get("parentId")
    if parent_id is not None:
        parent = db.query(Comment).filter(Comment.id == parent_id).one_or_none()
        if not parent:
            raise HTTPException(status_code=404, detail=COMMENT_NOT_FOUND)
        if parent.post_id != post.id:
            raise HTTPException(status_code=400, detail="다른 게시글의 댓글에는 답글을 달 수 없습니다.")

    comment = Comment(
        post_id=post.id,
        parent_id=parent_id,
        writer=writer,
        content=content,
        password=hash_password(password),
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return {"message": "댓글이 등록되었습니다.", "commentId": comment.id}


def _comment_thread_ids(db: Session, comment_id: int) -> list[int]:
    """Return the comment id followed by every reply beneath it, at any depth."""
    thread_ids = [comment_id]
    frontier = [comment_id]
    while frontier:
        rows = db.query(Comment.id).filter(Comment.parent_id.in_(frontier)).all()
        frontier = [row.id for row in rows if row.id not in thread_ids]
        thread_ids.extend(frontier)
    return thread_ids


@app.delete("/api/comments/{comment_id}")
def delete_comment(comment_id: int, payload: dict, db: Session = Depends(get_db)):
    (password,) = _require(payload, "password", detail="비밀번호를 입력해주세요.")

    comment = db.query(Comment).filter(Comment.id == comment_id).one_or_none()
    if not comment:
        raise HTTPException(status_code=404, detail=COMMENT_NOT_FOUND)
    if not verify_password(password, comment.password):
        raise HTTPException(status_code=403, detail=PASSWORD_MISMATCH)

    thread_ids = _comment_thread_ids(db, comment.id)
    db.query(Comment).filter(Comment.id.in_(thread_ids)).delete(synchronize_session=False)
    db.commit()
    return {"message": "댓글이 삭제되었습니다."}


# ── Stored games ────────────────────────────────────────────────────────


@app.get("/api/games", response_model=list[StoredGameOut])
def list_games(db: Session = Depends(get_db)):
    games = db.query(Game).order_by(desc(Game.game_date)).all()
    return [StoredGameOut.model_validate(game) for game in games]


@app.post("/api/games", status_code=201)
def create_game(payload: dict, db: Session = Depends(get_db)):
    home_team, away_team, game_date = _require(payload, "home_team", "away_team", "game_date")
    try:
        parsed_date = datetime.fromisoformat(str(game_date).strip())
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="game_date must be ISO 8601") from exc

    game = Game(
        home_team=home_team,
        away_team=away_team,
        game_date=parsed_date,
        status=payload.get("status") or "",
        score=payload.get("score") or "",
    )
    db.add(game)
    db.commit()
    db.refresh(game)
    return {"message": "경기 정보가 추가되었습니다.", "gameId": game.id}


# ── KBO schedule feed ───────────────────────────────────────────────────


@app.get("/api/kbo/schedule", response_model=list[NormalizedGame])
def api_kbo_schedule(
    date: str | None = None,
    month: str | None = None,
    source: str | None = None,
):
    try:
        query_date = parse_date_param(date)
        query_month = parse_month_param(month)
    except ConfigError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    if query_date is None and query_month is None and settings.kbo_default_today:
        query_date = today_local()

    source_key = source or settings.kbo_source
    try:
        return load_schedule(source_key, date=query_date, month=query_month)
    except ConfigError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ScheduleError as exc:
        logger.warning("KBO schedule degraded source=%s error=%s", source_key, exc)
        return []


@app.get("/api/kbo/games", response_model=ExtractedGamesResponse)
def api_kbo_games(date: str | None = None, source: str | None = None):
    try:
        query_date = parse_date_param(date)
    except ConfigError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if query_date is None:
        raise HTTPException(status_code=400, detail="date 파라미터가 필요합니다.")

    source_key = source or settings.kbo_source
    try:
        games = load_extracted(source_key, date=query_date)
    except ConfigError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ScheduleError as exc:
        logger.warning("KBO games degraded source=%s error=%s", source_key, exc)
        games = []
    return ExtractedGamesResponse(games=games)


# ── Chat ────────────────────────────────────────────────────────────────


@app.get("/api/chat/history")
def api_chat_history():
    return {"messages": chat_relay.history.snapshot()}


@app.websocket("/ws/chat")
async def chat_socket(websocket: WebSocket):
    relay = chat_relay
    await relay.connect(websocket)
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                payload = json.loads(raw)
            except ValueError:
                logger.debug("Ignoring non-JSON chat frame.")
                continue
            message = build_message(payload)
            if message is None:
                continue
            await relay.broadcast(message)
    except WebSocketDisconnect:
        relay.disconnect(websocket)
