from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class CommentCreate(BaseModel):
    author_name: str = Field(min_length=1, max_length=255)
    author_email: EmailStr
    content: str = Field(min_length=1, max_length=5000)
    parent_id: Optional[int] = Field(default=None, gt=0)

    @field_validator("author_name", "content")
    @classmethod
    def strip_and_require(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class CommentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    post_id: int
    parent_id: Optional[int] = None
    author_name: str
    content: str
    approved: bool
    created_at: datetime


class CommentAdminRead(CommentRead):
    """Moderation view; includes the contact address readers never see."""

    author_email: Optional[str] = None
