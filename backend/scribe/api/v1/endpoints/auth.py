import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel import select

from scribe.api.deps import SessionDep
from scribe.core.config import settings
from scribe.core.messages import AuthMessages
from scribe.core.rate_limit import limiter
from scribe.core.security import create_access_token, verify_password
from scribe.models.user import User
from scribe.schemas.token import Token

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/token", response_model=Token)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login_access_token(
    request: Request,
    session: SessionDep,
    form_data: OAuth2PasswordRequestForm = Depends(),
) -> Token:
    statement = select(User).where(User.email == form_data.username.lower().strip())
    result = await session.exec(statement)
    user = result.one_or_none()
    if not user or not verify_password(form_data.password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=AuthMessages.INVALID_CREDENTIALS)

    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=AuthMessages.INACTIVE_USER)

    logger.info("Issued access token for user %s", user.id)
    return Token(access_token=create_access_token(subject=str(user.id)))
