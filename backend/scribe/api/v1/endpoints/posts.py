from typing import Optional

from fastapi import APIRouter, HTTPException, Request, status
from sqlmodel.ext.asyncio.session import AsyncSession

from scribe.api.deps import AccessGuardDep, SessionDep
from scribe.core.config import settings
from scribe.core.exceptions import InvalidResource
from scribe.core.rate_limit import limiter
from scribe.models.blog import Blog
from scribe.models.post import Post
from scribe.schemas.comment import CommentCreate, CommentRead
from scribe.schemas.post import PostRead
from scribe.services import blogs as blogs_service
from scribe.services import comments as comments_service
from scribe.services import posts as posts_service

router = APIRouter()


async def _load_post(session: AsyncSession, slug: str) -> tuple[Post, Optional[Blog]]:
    post = await posts_service.get_post_by_slug(session, slug=slug)
    if post is None:
        raise InvalidResource("post", slug)

    blog = None
    if post.blog_id is not None:
        blog = await blogs_service.get_blog(session, blog_id=post.blog_id)
    return post, blog


@router.get("/{slug}", response_model=PostRead)
async def read_post(slug: str, session: SessionDep, guard: AccessGuardDep) -> PostRead:
    post, blog = await _load_post(session, slug)

    await guard.authorize(blog=blog, post=post)

    # Only reached once the guard allowed the request
    post = await posts_service.increment_view_count(session, post)
    comments = await comments_service.list_approved_comments(session, post_id=post.id)

    detail = PostRead.model_validate(post)
    detail.comments = [CommentRead.model_validate(comment) for comment in comments]
    return detail


@router.post("/{slug}/comments", response_model=CommentRead, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.COMMENT_RATE_LIMIT)
async def submit_comment(
    request: Request,
    slug: str,
    comment_in: CommentCreate,
    session: SessionDep,
    guard: AccessGuardDep,
) -> CommentRead:
    post, blog = await _load_post(session, slug)

    await guard.authorize(blog=blog, post=post)

    try:
        comment = await comments_service.create_comment(
            session,
            post=post,
            author_name=comment_in.author_name,
            author_email=comment_in.author_email,
            content=comment_in.content,
            parent_id=comment_in.parent_id,
        )
    except comments_service.CommentValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    await session.commit()
    await session.refresh(comment)
    return CommentRead.model_validate(comment)
