from collections.abc import Callable
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from pydantic import ValidationError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from scribe.core.config import settings
from scribe.core.messages import AuthMessages
from scribe.core.security import decode_access_token
from scribe.db.session import AsyncSessionLocal, get_session
from scribe.models.user import User, UserRole
from scribe.schemas.token import TokenPayload
from scribe.services.grants import SqlGrantStore
from scribe.services.guard import AccessGuard
from scribe.services.visibility import ANONYMOUS, Principal

SessionDep = Annotated[AsyncSession, Depends(get_session)]

# auto_error=False: reader routes accept anonymous requests
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/token", auto_error=False)


async def _user_from_token(session: AsyncSession, token: str) -> Optional[User]:
    try:
        token_data = TokenPayload(**decode_access_token(token))
    except (JWTError, ValidationError):
        return None
    if not token_data.sub or not token_data.sub.isdigit():
        return None
    result = await session.exec(select(User).where(User.id == int(token_data.sub)))
    return result.one_or_none()


async def get_current_user(
    token: Annotated[Optional[str], Depends(oauth2_scheme)],
    session: SessionDep,
) -> User:
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=AuthMessages.NOT_AUTHENTICATED,
            headers={"WWW-Authenticate": "Bearer"},
        )
    user = await _user_from_token(session, token)
    if not user:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=AuthMessages.INVALID_TOKEN)
    return user


async def get_current_active_user(
    current_user: Annotated[User, Depends(get_current_user)]
) -> User:
    if not current_user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=AuthMessages.INACTIVE_USER)
    return current_user


def require_roles(*roles: UserRole) -> Callable:
    async def dependency(current_user: Annotated[User, Depends(get_current_active_user)]) -> User:
        if roles and current_user.role not in roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=AuthMessages.INSUFFICIENT_PRIVILEGES)
        return current_user

    return dependency


def content_manager_roles() -> tuple[UserRole, ...]:
    return tuple(UserRole(role) for role in settings.content_manager_roles)


async def get_principal(
    token: Annotated[Optional[str], Depends(oauth2_scheme)],
    session: SessionDep,
) -> Principal:
    """Resolve the requesting principal for reader routes.

    Missing, invalid or expired tokens and unknown or inactive users all
    resolve to the anonymous principal, which then gets the login redirect.
    """
    if not token:
        return ANONYMOUS
    user = await _user_from_token(session, token)
    if user is None or not user.is_active:
        return ANONYMOUS
    return Principal(id=user.id, role=user.role)


def get_grant_store() -> SqlGrantStore:
    return SqlGrantStore(AsyncSessionLocal, timeout=settings.GRANT_STORE_TIMEOUT_SECONDS)


PrincipalDep = Annotated[Principal, Depends(get_principal)]
GrantStoreDep = Annotated[SqlGrantStore, Depends(get_grant_store)]


def requested_path(request: Request) -> str:
    path = request.url.path
    if request.url.query:
        path = f"{path}?{request.url.query}"
    return path


async def get_access_guard(
    request: Request,
    principal: PrincipalDep,
    grants: GrantStoreDep,
) -> AccessGuard:
    return AccessGuard(principal, grants, requested_path=requested_path(request))


AccessGuardDep = Annotated[AccessGuard, Depends(get_access_guard)]

ContentManagerDep = Annotated[User, Depends(require_roles(*content_manager_roles()))]
