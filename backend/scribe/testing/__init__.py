"""
Shared test utilities and factories.

Re-exports all factory functions for convenient imports:
    from scribe.testing import create_user, create_blog, get_auth_headers
"""

from scribe.testing.factories import (
    create_blog,
    create_comment,
    create_post,
    create_user,
    get_auth_headers,
    get_auth_token,
    grant_blog_access,
    grant_post_access,
)

__all__ = [
    "create_blog",
    "create_comment",
    "create_post",
    "create_user",
    "get_auth_headers",
    "get_auth_token",
    "grant_blog_access",
    "grant_post_access",
]
