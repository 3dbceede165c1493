from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from scribe.schemas.post import PostSummary


class BlogRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    description: Optional[str] = None
    owner_id: int
    is_private: bool
    created_at: datetime


class BlogDetail(BlogRead):
    posts: List[PostSummary] = Field(default_factory=list)
