"""Access evaluation: the blog gate, the post gate and their composition.

Both gates are pure predicates over ``(Principal, resource, GrantLookup)``.
They never write and never cache; every request is evaluated from scratch.

Ordering inside each gate matters:

  1. Tier checks that need no identity (public blog / public post)
  2. Admin bypass, before any grant lookup
  3. Anonymous principals stop here; grants only match known users
  4. Ownership / authorship
  5. Grant lookup, the only branch that touches the store

``evaluate_access`` runs the two gates concurrently.  A definite ``False``
from either gate wins over a store failure in the other.

Listing endpoints use ``accessible_blogs_statement`` and
``visible_posts_statement``, which express the same rules as SQL so a list
never shows an entry the detail route would refuse.
"""

import asyncio
import logging
from typing import Any

from sqlalchemy import and_, false, or_
from sqlmodel import select

from scribe.core.exceptions import InvalidResource
from scribe.models.access import BlogAccess, PostAccess
from scribe.models.blog import Blog
from scribe.models.post import Post, PostVisibility
from scribe.services.visibility import (
    AccessDecision,
    BlogPrivacy,
    GRANT_CONSULTING_VISIBILITIES,
    GrantLookup,
    Principal,
    blog_privacy,
    post_visibility,
    verdict_for,
)

logger = logging.getLogger(__name__)


async def can_access_blog(principal: Principal, blog: Any, grants: GrantLookup) -> bool:
    if blog_privacy(blog) == BlogPrivacy.public:
        return True
    if principal.is_admin:
        return True
    if principal.is_anonymous:
        return False
    if principal.id == blog.owner_id:
        return True
    return await grants.has_blog_grant(blog.id, principal.id)


async def can_access_post(principal: Principal, post: Any, grants: GrantLookup) -> bool:
    """Post-tier gate only. The parent blog gate is composed by ``evaluate_access``."""
    visibility = post_visibility(post)
    if visibility == PostVisibility.public:
        return True
    if principal.is_admin:
        return True
    if principal.is_anonymous:
        return False
    if principal.id == post.author_id:
        return True
    if visibility in GRANT_CONSULTING_VISIBILITIES:
        return await grants.has_post_grant(post.id, principal.id)
    return False


async def evaluate_access(
    principal: Principal,
    blog: Any | None,
    post: Any | None = None,
    *,
    grants: GrantLookup,
) -> AccessDecision:
    """Combine the blog gate and the post gate into a verdict.

    Args:
        principal: The requesting identity.
        blog: The blog being read, or the post's parent blog.  ``None`` only
            for posts that do not belong to a blog.
        post: The post being read, if any.
        grants: Grant lookup consulted by the grant-dependent branches.

    Raises:
        InvalidResource: ``post`` names a parent blog that was not supplied.
        StoreUnavailable: a required grant lookup failed and no gate denied.
    """
    if blog is None and post is None:
        raise ValueError("evaluate_access needs a blog, a post, or both")
    if post is not None and post.blog_id is not None:
        if blog is None or blog.id != post.blog_id:
            raise InvalidResource("blog", post.blog_id)

    gates = []
    if blog is not None:
        gates.append(can_access_blog(principal, blog, grants))
    if post is not None:
        gates.append(can_access_post(principal, post, grants))

    results = await asyncio.gather(*gates, return_exceptions=True)

    if any(result is False for result in results):
        allowed = False
    else:
        for result in results:
            if isinstance(result, BaseException):
                raise result
        allowed = True

    decision = AccessDecision(verdict=verdict_for(principal, allowed))
    logger.debug(
        "Access %s for principal=%s blog=%s post=%s",
        decision.verdict.value,
        principal.id,
        getattr(blog, "id", None),
        getattr(post, "id", None),
    )
    return decision


# ── Listing filters ─────────────────────────────────────────────


def accessible_blogs_statement(principal: Principal):
    """Blogs the principal passes the blog gate for, newest first."""
    statement = select(Blog)
    if principal.is_admin:
        pass
    elif principal.is_anonymous:
        statement = statement.where(Blog.is_private == false())
    else:
        granted = select(BlogAccess.blog_id).where(BlogAccess.user_id == principal.id)
        statement = statement.where(
            or_(
                Blog.is_private == false(),
                Blog.owner_id == principal.id,
                Blog.id.in_(granted),
            )
        )
    return statement.order_by(Blog.created_at.desc(), Blog.id.desc())


def visible_posts_statement(principal: Principal, *, blog_id: int | None):
    """Posts in ``blog_id`` the principal passes the post gate for.

    The caller has already passed the blog gate for ``blog_id``.
    """
    statement = select(Post).where(Post.blog_id == blog_id)
    if principal.is_admin:
        pass
    elif principal.is_anonymous:
        statement = statement.where(Post.visibility == PostVisibility.public)
    else:
        granted = select(PostAccess.post_id).where(PostAccess.user_id == principal.id)
        statement = statement.where(
            or_(
                Post.visibility == PostVisibility.public,
                Post.author_id == principal.id,
                and_(Post.visibility == PostVisibility.restricted, Post.id.in_(granted)),
            )
        )
    return statement.order_by(Post.created_at.desc(), Post.id.desc())
