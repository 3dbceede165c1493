from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from scribe.models.post import PostVisibility
from scribe.schemas.comment import CommentRead


class PostSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    blog_id: Optional[int] = None
    title: str
    slug: str
    excerpt: Optional[str] = None
    visibility: PostVisibility
    author_id: int
    created_at: datetime


class PostRead(PostSummary):
    content: str
    view_count: int
    updated_at: datetime
    comments: List[CommentRead] = Field(default_factory=list)
