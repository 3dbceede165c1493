from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from scribe.models.post import Post


async def get_post(session: AsyncSession, *, post_id: int) -> Post | None:
    result = await session.exec(select(Post).where(Post.id == post_id))
    return result.one_or_none()


async def get_post_by_slug(session: AsyncSession, *, slug: str) -> Post | None:
    result = await session.exec(select(Post).where(Post.slug == slug))
    return result.one_or_none()


async def increment_view_count(session: AsyncSession, post: Post) -> Post:
    await session.exec(
        update(Post).where(Post.id == post.id).values(view_count=Post.view_count + 1)
    )
    await session.commit()
    await session.refresh(post)
    return post

