"""Assistant account routes (admins only)."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.database import get_db
from tracker.core.deps import AdminUser
from tracker.schemas.assistant import AssistantCreate, AssistantResponse, AssistantUpdate
from tracker.services import assistant as assistant_service

router = APIRouter(prefix="/assistants", tags=["Assistants"])


@router.get("", response_model=list[AssistantResponse])
async def list_assistants(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: AdminUser,
) -> list[AssistantResponse]:
    """List all assistant accounts."""
    assistants = await assistant_service.get_assistants(db)
    return [AssistantResponse.model_validate(a) for a in assistants]


@router.post("", response_model=AssistantResponse, status_code=status.HTTP_201_CREATED)
async def create_assistant(
    assistant_data: AssistantCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: AdminUser,
) -> AssistantResponse:
    """Create an assistant account."""
    existing = await assistant_service.get_assistant_by_assistant_id(db, assistant_data.assistant_id)
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Assistant ID already exists",
        )

    assistant = await assistant_service.create_assistant(db, assistant_data)
    return AssistantResponse.model_validate(assistant)


@router.patch("/{assistant_id}", response_model=AssistantResponse)
async def update_assistant(
    assistant_id: str,
    assistant_data: AssistantUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: AdminUser,
) -> AssistantResponse:
    """Update an assistant account."""
    assistant = await assistant_service.get_assistant_by_assistant_id(db, assistant_id)
    if not assistant:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Assistant not found",
        )

    updated = await assistant_service.update_assistant(db, assistant, assistant_data)
    return AssistantResponse.model_validate(updated)


@router.delete("/{assistant_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_assistant(
    assistant_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: AdminUser,
) -> None:
    """Delete an assistant account. Admins cannot delete themselves."""
    if assistant_id == current_user.assistant_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot delete your own account",
        )

    assistant = await assistant_service.get_assistant_by_assistant_id(db, assistant_id)
    if not assistant:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Assistant not found",
        )

    await assistant_service.delete_assistant(db, assistant)
