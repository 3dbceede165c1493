"""Access-list administration.

PUT bodies carry the complete desired set; omitted ids lose access.
"""

from fastapi import APIRouter

from scribe.api.deps import ContentManagerDep, GrantStoreDep
from scribe.schemas.access import (
    BlogAccessListRead,
    BlogAccessListUpdate,
    UserAccessListRead,
    UserAccessListUpdate,
)
from scribe.services import access_admin as access_admin_service

router = APIRouter()


@router.get("/blogs/{blog_id}/access", response_model=UserAccessListRead)
async def read_blog_access(
    blog_id: int,
    grants: GrantStoreDep,
    _current_user: ContentManagerDep,
) -> UserAccessListRead:
    user_ids = await access_admin_service.get_blog_access_list(grants, blog_id=blog_id)
    return UserAccessListRead(user_ids=sorted(user_ids))


@router.put("/blogs/{blog_id}/access", response_model=UserAccessListRead)
async def replace_blog_access(
    blog_id: int,
    access_in: UserAccessListUpdate,
    grants: GrantStoreDep,
    _current_user: ContentManagerDep,
) -> UserAccessListRead:
    user_ids = await access_admin_service.set_blog_access_list(
        grants, blog_id=blog_id, user_ids=access_in.user_ids
    )
    return UserAccessListRead(user_ids=sorted(user_ids))


@router.get("/posts/{post_id}/access", response_model=UserAccessListRead)
async def read_post_access(
    post_id: int,
    grants: GrantStoreDep,
    _current_user: ContentManagerDep,
) -> UserAccessListRead:
    user_ids = await access_admin_service.get_post_access_list(grants, post_id=post_id)
    return UserAccessListRead(user_ids=sorted(user_ids))


@router.put("/posts/{post_id}/access", response_model=UserAccessListRead)
async def replace_post_access(
    post_id: int,
    access_in: UserAccessListUpdate,
    grants: GrantStoreDep,
    _current_user: ContentManagerDep,
) -> UserAccessListRead:
    user_ids = await access_admin_service.set_post_access_list(
        grants, post_id=post_id, user_ids=access_in.user_ids
    )
    return UserAccessListRead(user_ids=sorted(user_ids))


@router.get("/users/{user_id}/blog-access", response_model=BlogAccessListRead)
async def read_user_blog_access(
    user_id: int,
    grants: GrantStoreDep,
    _current_user: ContentManagerDep,
) -> BlogAccessListRead:
    blog_ids = await access_admin_service.get_user_blog_access(grants, user_id=user_id)
    return BlogAccessListRead(blog_ids=sorted(blog_ids))


@router.put("/users/{user_id}/blog-access", response_model=BlogAccessListRead)
async def replace_user_blog_access(
    user_id: int,
    access_in: BlogAccessListUpdate,
    grants: GrantStoreDep,
    _current_user: ContentManagerDep,
) -> BlogAccessListRead:
    blog_ids = await access_admin_service.set_user_blog_access(
        grants, user_id=user_id, blog_ids=access_in.blog_ids
    )
    return BlogAccessListRead(blog_ids=sorted(blog_ids))
