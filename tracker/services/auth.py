"""Authentication service."""

from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.security import verify_password
from tracker.models.assistant import Assistant
from tracker.services.assistant import get_assistant_by_assistant_id


async def authenticate_assistant(
    db: AsyncSession,
    assistant_id: str,
    password: str,
) -> Assistant | None:
    """Authenticate an assistant with login id and password."""
    assistant = await get_assistant_by_assistant_id(db, assistant_id)

    if not assistant:
        return None

    if not verify_password(password, assistant.password_hash):
        return None

    return assistant
