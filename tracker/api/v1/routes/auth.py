"""Authentication routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.config import Settings
from tracker.core.database import get_db
from tracker.core.deps import CurrentUser, SettingsDep
from tracker.core.permissions import AccountState
from tracker.core.security import create_access_token
from tracker.models.assistant import Assistant
from tracker.schemas.assistant import AssistantResponse
from tracker.schemas.auth import LoginRequest, Token
from tracker.services.auth import authenticate_assistant

router = APIRouter(prefix="/auth", tags=["Authentication"])


def issue_token(response: Response, assistant: Assistant, app_settings: Settings) -> Token:
    """Create an access token and set it as the auth cookie."""
    if assistant.account_state == AccountState.DEACTIVATED:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is deactivated",
        )

    access_token = create_access_token(
        data={"sub": assistant.assistant_id, "role": assistant.role}
    )
    response.set_cookie(
        key=app_settings.AUTH_COOKIE_NAME,
        value=access_token,
        httponly=True,
        samesite="lax",
        max_age=app_settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )
    return Token(access_token=access_token)


@router.post("/login", response_model=Token)
async def login(
    login_data: LoginRequest,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
    app_settings: SettingsDep,
) -> Token:
    """Login with assistant id and password."""
    assistant = await authenticate_assistant(db, login_data.assistant_id, login_data.password)

    if not assistant:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect assistant id or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return issue_token(response, assistant, app_settings)


@router.post("/login/form", response_model=Token)
async def login_form(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
    app_settings: SettingsDep,
) -> Token:
    """Login with OAuth2 form (for Swagger UI). Username = assistant id."""
    assistant = await authenticate_assistant(db, form_data.username, form_data.password)

    if not assistant:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect assistant id or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return issue_token(response, assistant, app_settings)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(response: Response, app_settings: SettingsDep) -> None:
    """Clear the auth cookie."""
    response.delete_cookie(app_settings.AUTH_COOKIE_NAME)


@router.get("/me", response_model=AssistantResponse)
async def me(current_user: CurrentUser) -> AssistantResponse:
    """The authenticated assistant."""
    return AssistantResponse.model_validate(current_user)
