from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from sqlalchemy import Column, DateTime, Integer, Text
from sqlmodel import Enum as SQLEnum, Field, SQLModel


class PostVisibility(str, Enum):
    public = "public"
    private = "private"
    restricted = "restricted"


class Post(SQLModel, table=True):
    __tablename__ = "posts"

    id: Optional[int] = Field(default=None, primary_key=True)
    # Posts outside any blog only go through the post gate
    blog_id: Optional[int] = Field(default=None, foreign_key="blogs.id", nullable=True, index=True)
    title: str = Field(nullable=False, max_length=255)
    slug: str = Field(index=True, unique=True, nullable=False, max_length=255)
    content: str = Field(default="", sa_column=Column(Text, nullable=False, server_default=""))
    excerpt: Optional[str] = Field(default=None)
    visibility: PostVisibility = Field(
        default=PostVisibility.public,
        sa_column=Column(
            SQLEnum(PostVisibility, name="post_visibility"),
            nullable=False,
            server_default=PostVisibility.public.value,
        ),
    )
    author_id: int = Field(foreign_key="users.id", nullable=False, index=True)
    view_count: int = Field(default=0, sa_column=Column(Integer, nullable=False, server_default="0"))
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
