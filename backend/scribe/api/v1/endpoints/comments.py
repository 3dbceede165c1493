"""Comment moderation for content managers."""

from typing import List

from fastapi import APIRouter, Query, status

from scribe.api.deps import ContentManagerDep, SessionDep
from scribe.schemas.comment import CommentAdminRead
from scribe.services import comments as comments_service
from scribe.services.comments import CommentStatus

router = APIRouter()


@router.get("/", response_model=List[CommentAdminRead])
async def list_comments(
    session: SessionDep,
    _current_user: ContentManagerDep,
    comment_status: CommentStatus = Query(default=CommentStatus.pending, alias="status"),
) -> List[CommentAdminRead]:
    comments = await comments_service.list_comments(session, status=comment_status)
    return [CommentAdminRead.model_validate(comment) for comment in comments]


@router.post("/{comment_id}/approve", response_model=CommentAdminRead)
async def approve_comment(
    comment_id: int,
    session: SessionDep,
    _current_user: ContentManagerDep,
) -> CommentAdminRead:
    comment = await comments_service.approve_comment(session, comment_id=comment_id)
    await session.commit()
    await session.refresh(comment)
    return CommentAdminRead.model_validate(comment)


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    comment_id: int,
    session: SessionDep,
    _current_user: ContentManagerDep,
) -> None:
    await comments_service.delete_comment(session, comment_id=comment_id)
    await session.commit()
