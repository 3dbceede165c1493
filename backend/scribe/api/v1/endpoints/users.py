from typing import Annotated

from fastapi import APIRouter, Depends

from scribe.api.deps import get_current_active_user
from scribe.models.user import User
from scribe.schemas.user import UserRead

router = APIRouter()


@router.get("/me", response_model=UserRead)
async def read_users_me(current_user: Annotated[User, Depends(get_current_active_user)]) -> User:
    return current_user
