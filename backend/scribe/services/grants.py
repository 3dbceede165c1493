"""SQL-backed grant store.

Reads open their own short-lived session so the blog and post lookups of a
single evaluation can run concurrently.  Every read is bounded by
``GRANT_STORE_TIMEOUT_SECONDS``; driver errors and timeouts surface as
``StoreUnavailable`` and are never turned into ``True``/``False``.

Replacements are wholesale: the existing rows for the target entity are
deleted and the new full set inserted inside one transaction, after the
referenced ids have been validated in that same transaction.  Readers on
other connections see either the old set or the new one.

The target row (the blog, post or user the set belongs to) is locked with
``SELECT ... FOR UPDATE`` first, so concurrent replacements of the same set
run one after the other.  A constraint violation at insert time means a
referenced row was deleted after validation: the ids are checked again and
reported as ``MalformedGrantSet``, or as ``StoreUnavailable`` if they all
still exist.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import TypeVar

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from scribe.core.exceptions import InvalidResource, MalformedGrantSet, StoreUnavailable
from scribe.models.access import BlogAccess, PostAccess
from scribe.models.blog import Blog
from scribe.models.post import Post
from scribe.models.user import User

logger = logging.getLogger(__name__)

T = TypeVar("T")

SessionFactory = Callable[[], AsyncSession]
Step = Callable[[AsyncSession], Awaitable[None]]


def normalize_ids(values: Iterable[int] | None) -> set[int]:
    if not values:
        return set()
    return {int(value) for value in values}


async def _existing_ids(session: AsyncSession, column, ids: set[int]) -> set[int]:
    if not ids:
        return set()
    result = await session.exec(select(column).where(column.in_(ids)))
    return set(result.all())


async def _lock_target(session: AsyncSession, column, target_id: int) -> bool:
    """Row-lock the entity whose grant set is being replaced. False if it does not exist."""
    result = await session.exec(select(column).where(column == target_id).with_for_update())
    return result.first() is not None


class SqlGrantStore:
    def __init__(self, session_factory: SessionFactory, *, timeout: float | None = None) -> None:
        self._session_factory = session_factory
        self._timeout = timeout

    async def _read(self, operation: str, query: Callable[[AsyncSession], Awaitable[T]]) -> T:
        async def run() -> T:
            async with self._session_factory() as session:
                return await query(session)

        try:
            return await asyncio.wait_for(run(), timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            logger.warning("Grant store timed out during %s", operation)
            raise StoreUnavailable(operation, "timed out") from exc
        except SQLAlchemyError as exc:
            logger.warning("Grant store failed during %s", operation, exc_info=exc)
            raise StoreUnavailable(operation, type(exc).__name__) from exc

    async def _write(self, operation: str, validate: Step, apply: Step) -> None:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    await validate(session)
                    await apply(session)
        except IntegrityError as exc:
            logger.warning("Grant store write conflict during %s", operation, exc_info=exc)
            # A referenced row vanished after validation; report it if it is still gone
            await self._revalidate(operation, validate)
            raise StoreUnavailable(operation, "conflicting write") from exc
        except SQLAlchemyError as exc:
            logger.warning("Grant store failed during %s", operation, exc_info=exc)
            raise StoreUnavailable(operation, type(exc).__name__) from exc

    async def _revalidate(self, operation: str, validate: Step) -> None:
        try:
            async with self._session_factory() as session:
                await validate(session)
        except SQLAlchemyError as exc:
            raise StoreUnavailable(operation, type(exc).__name__) from exc

    # ── Lookups ──────────────────────────────────────────────────

    async def has_blog_grant(self, blog_id: int, user_id: int) -> bool:
        async def query(session: AsyncSession) -> bool:
            stmt = (
                select(BlogAccess.blog_id)
                .where(BlogAccess.blog_id == blog_id, BlogAccess.user_id == user_id)
                .limit(1)
            )
            result = await session.exec(stmt)
            return result.first() is not None

        return await self._read("has_blog_grant", query)

    async def has_post_grant(self, post_id: int, user_id: int) -> bool:
        async def query(session: AsyncSession) -> bool:
            stmt = (
                select(PostAccess.post_id)
                .where(PostAccess.post_id == post_id, PostAccess.user_id == user_id)
                .limit(1)
            )
            result = await session.exec(stmt)
            return result.first() is not None

        return await self._read("has_post_grant", query)

    async def list_blog_grantees(self, blog_id: int) -> set[int]:
        async def query(session: AsyncSession) -> set[int]:
            if not await _existing_ids(session, Blog.id, {blog_id}):
                raise InvalidResource("blog", blog_id)
            result = await session.exec(select(BlogAccess.user_id).where(BlogAccess.blog_id == blog_id))
            return set(result.all())

        return await self._read("list_blog_grantees", query)

    async def list_post_grantees(self, post_id: int) -> set[int]:
        async def query(session: AsyncSession) -> set[int]:
            if not await _existing_ids(session, Post.id, {post_id}):
                raise InvalidResource("post", post_id)
            result = await session.exec(select(PostAccess.user_id).where(PostAccess.post_id == post_id))
            return set(result.all())

        return await self._read("list_post_grantees", query)

    async def list_user_blog_ids(self, user_id: int) -> set[int]:
        async def query(session: AsyncSession) -> set[int]:
            if not await _existing_ids(session, User.id, {user_id}):
                raise InvalidResource("user", user_id)
            result = await session.exec(select(BlogAccess.blog_id).where(BlogAccess.user_id == user_id))
            return set(result.all())

        return await self._read("list_user_blog_ids", query)

    # ── Replacement ──────────────────────────────────────────────

    async def replace_blog_grants(self, user_id: int, blog_ids: Iterable[int]) -> set[int]:
        """Make ``blog_ids`` the complete set of private blogs granted to ``user_id``."""
        desired = normalize_ids(blog_ids)

        async def validate(session: AsyncSession) -> None:
            if not await _lock_target(session, User.id, user_id):
                raise InvalidResource("user", user_id)
            missing = desired - await _existing_ids(session, Blog.id, desired)
            if missing:
                raise MalformedGrantSet("blog", missing)

        async def apply(session: AsyncSession) -> None:
            await session.exec(delete(BlogAccess).where(BlogAccess.user_id == user_id))
            session.add_all([BlogAccess(blog_id=blog_id, user_id=user_id) for blog_id in sorted(desired)])

        await self._write("replace_blog_grants", validate, apply)
        return desired

    async def replace_blog_access_list(self, blog_id: int, user_ids: Iterable[int]) -> set[int]:
        """Make ``user_ids`` the complete set of users granted ``blog_id``."""
        desired = normalize_ids(user_ids)

        async def validate(session: AsyncSession) -> None:
            if not await _lock_target(session, Blog.id, blog_id):
                raise InvalidResource("blog", blog_id)
            missing = desired - await _existing_ids(session, User.id, desired)
            if missing:
                raise MalformedGrantSet("user", missing)

        async def apply(session: AsyncSession) -> None:
            await session.exec(delete(BlogAccess).where(BlogAccess.blog_id == blog_id))
            session.add_all([BlogAccess(blog_id=blog_id, user_id=user_id) for user_id in sorted(desired)])

        await self._write("replace_blog_access_list", validate, apply)
        return desired

    async def replace_post_grants(self, post_id: int, user_ids: Iterable[int]) -> set[int]:
        """Make ``user_ids`` the complete set of users granted ``post_id``."""
        desired = normalize_ids(user_ids)

        async def validate(session: AsyncSession) -> None:
            if not await _lock_target(session, Post.id, post_id):
                raise InvalidResource("post", post_id)
            missing = desired - await _existing_ids(session, User.id, desired)
            if missing:
                raise MalformedGrantSet("user", missing)

        async def apply(session: AsyncSession) -> None:
            await session.exec(delete(PostAccess).where(PostAccess.post_id == post_id))
            session.add_all([PostAccess(post_id=post_id, user_id=user_id) for user_id in sorted(desired)])

        await self._write("replace_post_grants", validate, apply)
        return desired
