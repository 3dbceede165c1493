from typing import List

from fastapi import APIRouter

from scribe.api.deps import AccessGuardDep, PrincipalDep, SessionDep
from scribe.core.exceptions import InvalidResource
from scribe.schemas.blog import BlogDetail, BlogRead
from scribe.schemas.post import PostSummary
from scribe.services import blogs as blogs_service

router = APIRouter()


@router.get("/", response_model=List[BlogRead])
async def list_blogs(session: SessionDep, principal: PrincipalDep) -> List[BlogRead]:
    blogs = await blogs_service.list_accessible_blogs(session, principal=principal)
    return [BlogRead.model_validate(blog) for blog in blogs]


@router.get("/{slug}", response_model=BlogDetail)
async def read_blog(slug: str, session: SessionDep, guard: AccessGuardDep) -> BlogDetail:
    blog = await blogs_service.get_blog_by_slug(session, slug=slug)
    if blog is None:
        raise InvalidResource("blog", slug)

    await guard.authorize(blog=blog)

    posts = await blogs_service.list_visible_posts(session, principal=guard.principal, blog=blog)
    detail = BlogDetail.model_validate(blog)
    detail.posts = [PostSummary.model_validate(post) for post in posts]
    return detail
