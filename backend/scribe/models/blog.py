from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, Column, DateTime, text
from sqlmodel import Field, SQLModel


class Blog(SQLModel, table=True):
    __tablename__ = "blogs"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(nullable=False, max_length=255)
    slug: str = Field(index=True, unique=True, nullable=False, max_length=255)
    description: Optional[str] = Field(default=None)
    owner_id: int = Field(foreign_key="users.id", nullable=False, index=True)
    is_private: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, server_default=text("false")),
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
