"""Assistant service."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.security import get_password_hash
from tracker.models.assistant import Assistant
from tracker.schemas.assistant import AssistantCreate, AssistantUpdate


async def get_assistant_by_assistant_id(db: AsyncSession, assistant_id: str) -> Assistant | None:
    """Get assistant by login id."""
    result = await db.execute(
        select(Assistant).where(Assistant.assistant_id == assistant_id)
    )
    return result.scalar_one_or_none()


async def get_assistants(db: AsyncSession) -> list[Assistant]:
    """Get all assistants ordered by login id."""
    result = await db.execute(select(Assistant).order_by(Assistant.assistant_id))
    return list(result.scalars().all())


async def create_assistant(db: AsyncSession, assistant_data: AssistantCreate) -> Assistant:
    """Create a new assistant account."""
    assistant = Assistant(
        assistant_id=assistant_data.assistant_id,
        name=assistant_data.name,
        phone=assistant_data.phone,
        password_hash=get_password_hash(assistant_data.password),
        role=assistant_data.role.value,
        account_state=assistant_data.account_state.value,
    )

    db.add(assistant)
    await db.commit()
    await db.refresh(assistant)

    return assistant


async def update_assistant(
    db: AsyncSession,
    assistant: Assistant,
    assistant_data: AssistantUpdate,
) -> Assistant:
    """Update an assistant; a new password is re-hashed."""
    update_data = assistant_data.model_dump(exclude_unset=True, mode="json")

    if "password" in update_data:
        password = update_data.pop("password")
        if password:
            assistant.password_hash = get_password_hash(password)

    for field, value in update_data.items():
        setattr(assistant, field, value)

    await db.commit()
    await db.refresh(assistant)

    return assistant


async def delete_assistant(db: AsyncSession, assistant: Assistant) -> None:
    """Delete an assistant account."""
    await db.delete(assistant)
    await db.commit()
