from datetime import datetime
from pydantic import BaseModel, ConfigDict
from typing import Optional

from ybsports.schedule.schema import ExtractedGame


class UserOut(BaseModel):
    id: int
    username: str
    nickname: str
    intro: str
    profile_image: Optional[str]

    model_config = ConfigDict(from_attributes=True)


class PostSummaryOut(BaseModel):
    id: int
    title: str
    writer: str
    created_at: Optional[datetime]
    views: int
    likes: int

    model_config = ConfigDict(from_attributes=True)


class PostOut(PostSummaryOut):
    content: str


class CommentOut(BaseModel):
    id: int
    post_id: int
    parentId: Optional[int] = None
    writer: str
    content: str
    created_at: Optional[datetime]


class StoredGameOut(BaseModel):
    id: int
    home_team: str
    away_team: str
    game_date: datetime
    status: str
    score: str

    model_config = ConfigDict(from_attributes=True)


class ExtractedGamesResponse(BaseModel):
    games: list[ExtractedGame]
