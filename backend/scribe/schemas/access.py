from typing import List

from pydantic import BaseModel, Field, field_validator


def _sorted_unique(values: List[int]) -> List[int]:
    return sorted(set(values))


class UserAccessListUpdate(BaseModel):
    """Full replacement set of users granted a blog or post."""

    user_ids: List[int] = Field(default_factory=list)

    @field_validator("user_ids")
    @classmethod
    def dedupe(cls, value: List[int]) -> List[int]:
        return _sorted_unique(value)


class UserAccessListRead(BaseModel):
    user_ids: List[int] = Field(default_factory=list)


class BlogAccessListUpdate(BaseModel):
    """Full replacement set of private blogs granted to a user."""

    blog_ids: List[int] = Field(default_factory=list)

    @field_validator("blog_ids")
    @classmethod
    def dedupe(cls, value: List[int]) -> List[int]:
        return _sorted_unique(value)


class BlogAccessListRead(BaseModel):
    blog_ids: List[int] = Field(default_factory=list)
