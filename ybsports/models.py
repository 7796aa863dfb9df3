from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from .db import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)         # scrypt$<salt>$<hash>
    nickname = Column(String(50), nullable=False)
    profile_image = Column(Text, nullable=True)
    intro = Column(String(200), nullable=False, default="")
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Post(Base):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    writer = Column(String(50), nullable=False)
    password = Column(String(255), nullable=False)
    views = Column(Integer, nullable=False, default=0)
    likes = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    comments = relationship(
        "Comment",
        back_populates="post",
        cascade="all, delete-orphan",
    )


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    parent_id = Column(Integer, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True)
    writer = Column(String(50), nullable=False)
    content = Column(Text, nullable=False)
    password = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    post = relationship("Post", back_populates="comments")


class Game(Base):
    """Manually entered game rows, separate from the live KBO schedule feed."""

    __tablename__ = "games"

    id = Column(Integer, primary_key=True, index=True)
    home_team = Column(String(50), nullable=False, default="")
    away_team = Column(String(50), nullable=False, default="")
    game_date = Column(DateTime, nullable=False)
    status = Column(String(20), nullable=False, default="")
    score = Column(String(20), nullable=False, default="")
