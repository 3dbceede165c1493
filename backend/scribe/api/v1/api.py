from fastapi import APIRouter

from scribe.api.v1.endpoints import admin, auth, blogs, comments, posts, users

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(blogs.router, prefix="/blogs", tags=["blogs"])
api_router.include_router(posts.router, prefix="/posts", tags=["posts"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(comments.router, prefix="/admin/comments", tags=["comments"])
