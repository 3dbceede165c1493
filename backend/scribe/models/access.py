"""Explicit allow-list rows. Presence of a row is the permission."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime
from sqlmodel import Field, SQLModel


class BlogAccess(SQLModel, table=True):
    __tablename__ = "blog_access"

    blog_id: int = Field(foreign_key="blogs.id", primary_key=True)
    user_id: int = Field(foreign_key="users.id", primary_key=True, index=True)
    granted_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )


class PostAccess(SQLModel, table=True):
    __tablename__ = "post_access"

    post_id: int = Field(foreign_key="posts.id", primary_key=True)
    user_id: int = Field(foreign_key="users.id", primary_key=True, index=True)
    granted_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
