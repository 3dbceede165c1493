"""Import all models for metadata creation."""

from scribe.models.access import BlogAccess, PostAccess
from scribe.models.blog import Blog
from scribe.models.comment import Comment
from scribe.models.post import Post
from scribe.models.user import User

__all__ = [
    "User",
    "Blog",
    "Post",
    "Comment",
    "BlogAccess",
    "PostAccess",
]
