"""Comment submission and moderation.

New comments are stored unapproved and stay invisible to readers until a
content manager approves them.  Callers must have passed the post's
``AccessGuard`` before ``create_comment``; this module does no access checks.
"""

import logging
from collections.abc import Sequence
from enum import Enum
from typing import Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from scribe.core.exceptions import InvalidResource
from scribe.core.messages import CommentMessages
from scribe.models.comment import Comment
from scribe.models.post import Post

logger = logging.getLogger(__name__)


class CommentError(Exception):
    """Base error for comment operations."""


class CommentValidationError(CommentError):
    """Raised when the payload is inconsistent."""


class CommentStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    all = "all"


async def _get_comment(session: AsyncSession, *, comment_id: int) -> Optional[Comment]:
    result = await session.exec(select(Comment).where(Comment.id == comment_id))
    return result.one_or_none()


async def create_comment(
    session: AsyncSession,
    *,
    post: Post,
    author_name: str,
    author_email: str,
    content: str,
    parent_id: Optional[int] = None,
) -> Comment:
    if parent_id is not None:
        parent = await _get_comment(session, comment_id=parent_id)
        # Replies attach only to approved comments on the same post
        if parent is None or parent.post_id != post.id or not parent.approved:
            raise CommentValidationError(CommentMessages.INVALID_PARENT)

    comment = Comment(
        post_id=post.id,
        parent_id=parent_id,
        author_name=author_name,
        author_email=author_email,
        content=content,
        approved=False,
    )
    session.add(comment)
    await session.flush()
    await session.refresh(comment)
    logger.info("Comment %s submitted on post %s, awaiting moderation", comment.id, post.id)
    return comment


async def list_approved_comments(session: AsyncSession, *, post_id: int) -> Sequence[Comment]:
    stmt = (
        select(Comment)
        .where(Comment.post_id == post_id, Comment.approved.is_(True))
        .order_by(Comment.created_at.desc(), Comment.id.desc())
    )
    result = await session.exec(stmt)
    return result.all()


async def list_comments(
    session: AsyncSession,
    *,
    status: CommentStatus = CommentStatus.pending,
) -> Sequence[Comment]:
    stmt = select(Comment)
    if status == CommentStatus.pending:
        stmt = stmt.where(Comment.approved.is_(False))
    elif status == CommentStatus.approved:
        stmt = stmt.where(Comment.approved.is_(True))
    result = await session.exec(stmt.order_by(Comment.created_at.desc(), Comment.id.desc()))
    return result.all()


async def approve_comment(session: AsyncSession, *, comment_id: int) -> Comment:
    comment = await _get_comment(session, comment_id=comment_id)
    if comment is None:
        raise InvalidResource("comment", comment_id)
    if not comment.approved:
        comment.approved = True
        session.add(comment)
        await session.flush()
        logger.info("Comment %s approved", comment_id)
    return comment


async def delete_comment(session: AsyncSession, *, comment_id: int) -> None:
    comment = await _get_comment(session, comment_id=comment_id)
    if comment is None:
        raise InvalidResource("comment", comment_id)
    await session.delete(comment)
    await session.flush()
    logger.info("Comment %s deleted", comment_id)
