"""Dependencies for FastAPI routes."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.config import Settings, get_settings
from tracker.core.database import get_db
from tracker.core.permissions import AccountState, Role
from tracker.core.security import decode_access_token
from tracker.models.assistant import Assistant

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login/form", auto_error=False)

SettingsDep = Annotated[Settings, Depends(get_settings)]


async def get_current_user(
    request: Request,
    bearer_token: Annotated[str | None, Depends(oauth2_scheme)],
    db: Annotated[AsyncSession, Depends(get_db)],
    app_settings: SettingsDep,
) -> Assistant:
    """Get the authenticated assistant from the auth cookie or bearer token."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    token = request.cookies.get(app_settings.AUTH_COOKIE_NAME) or bearer_token
    if not token:
        raise credentials_exception

    payload = decode_access_token(token)
    if payload is None:
        raise credentials_exception

    assistant_id: str | None = payload.get("sub")
    if assistant_id is None:
        raise credentials_exception

    result = await db.execute(
        select(Assistant).where(Assistant.assistant_id == assistant_id)
    )
    user = result.scalar_one_or_none()

    if user is None:
        raise credentials_exception

    if user.account_state == AccountState.DEACTIVATED:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is deactivated",
        )

    return user


def require_roles(*roles: Role):
    """Dependency factory to check if user has one of the specified roles."""

    async def role_checker(
        current_user: Annotated[Assistant, Depends(get_current_user)],
    ) -> Assistant:
        if current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not enough permissions",
            )
        return current_user

    return role_checker


# Common dependency aliases
CurrentUser = Annotated[Assistant, Depends(get_current_user)]
AdminUser = Annotated[Assistant, Depends(require_roles(Role.ADMIN))]
