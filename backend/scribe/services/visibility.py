"""Visibility policy model: the tiers and how they compose.

Two orthogonal tiers decide whether content is readable:

  - Blog privacy: ``public`` or ``private`` (``Blog.is_private``)
  - Post visibility: ``public``, ``private`` or ``restricted``
    (``Post.visibility``)

Effective readability is ``blog gate AND post gate``.  The gates themselves
live in ``access.py``; this module holds the vocabulary they share: the
requesting ``Principal``, the ``GrantLookup`` protocol they consult, and the
three-way ``AccessVerdict`` handed to the guard.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Protocol

from scribe.models.post import PostVisibility
from scribe.models.user import UserRole


class BlogPrivacy(str, Enum):
    public = "public"
    private = "private"


class AccessVerdict(str, Enum):
    allowed = "allowed"
    denied_anonymous = "denied_anonymous"
    denied_authenticated = "denied_authenticated"


# Only admin bypasses read gates. Editors are elevated for mutation routes only.
READ_BYPASS_ROLES: frozenset[UserRole] = frozenset({UserRole.admin})

# Tiers whose grants are looked up. ``private`` posts never consult grants.
GRANT_CONSULTING_VISIBILITIES: frozenset[PostVisibility] = frozenset({PostVisibility.restricted})


@dataclass(frozen=True)
class Principal:
    """Who is asking. ``id`` of ``None`` is an anonymous reader."""

    id: Optional[int] = None
    role: Optional[UserRole] = None

    @property
    def is_anonymous(self) -> bool:
        return self.id is None

    @property
    def is_admin(self) -> bool:
        return self.role in READ_BYPASS_ROLES


ANONYMOUS = Principal()


@dataclass(frozen=True)
class AccessDecision:
    verdict: AccessVerdict

    @property
    def allowed(self) -> bool:
        return self.verdict == AccessVerdict.allowed


class GrantLookup(Protocol):
    """Read side of the grant store.

    Implementations return ``False`` when the query ran and found nothing and
    raise ``StoreUnavailable`` when the query could not run.
    """

    async def has_blog_grant(self, blog_id: int, user_id: int) -> bool: ...

    async def has_post_grant(self, post_id: int, user_id: int) -> bool: ...


def blog_privacy(blog: Any) -> BlogPrivacy:
    return BlogPrivacy.private if blog.is_private else BlogPrivacy.public


def post_visibility(post: Any) -> PostVisibility:
    value = post.visibility
    return value if isinstance(value, PostVisibility) else PostVisibility(value)


def requires_authentication(blog: Any | None, post: Any | None = None) -> bool:
    """True when no anonymous reader could ever pass the combined gates."""
    if blog is not None and blog_privacy(blog) == BlogPrivacy.private:
        return True
    if post is not None and post_visibility(post) != PostVisibility.public:
        return True
    return False


def verdict_for(principal: Principal, allowed: bool) -> AccessVerdict:
    if allowed:
        return AccessVerdict.allowed
    if principal.is_anonymous:
        return AccessVerdict.denied_anonymous
    return AccessVerdict.denied_authenticated
