from collections.abc import Sequence

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from scribe.models.blog import Blog
from scribe.models.post import Post
from scribe.services.access import accessible_blogs_statement, visible_posts_statement
from scribe.services.visibility import Principal


async def get_blog(session: AsyncSession, *, blog_id: int) -> Blog | None:
    result = await session.exec(select(Blog).where(Blog.id == blog_id))
    return result.one_or_none()


async def get_blog_by_slug(session: AsyncSession, *, slug: str) -> Blog | None:
    result = await session.exec(select(Blog).where(Blog.slug == slug))
    return result.one_or_none()


async def list_accessible_blogs(session: AsyncSession, *, principal: Principal) -> Sequence[Blog]:
    result = await session.exec(accessible_blogs_statement(principal))
    return result.all()


async def list_visible_posts(session: AsyncSession, *, principal: Principal, blog: Blog) -> Sequence[Post]:
    """Posts of ``blog`` the principal may open. Only call after the blog gate passed."""
    result = await session.exec(visible_posts_statement(principal, blog_id=blog.id))
    return result.all()
