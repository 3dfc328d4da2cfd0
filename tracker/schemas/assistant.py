"""Assistant schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from tracker.core.permissions import AccountState, Role
from tracker.schemas.validators import PhoneNumber


class AssistantCreate(BaseModel):
    """Schema for creating an assistant account."""

    assistant_id: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=200)
    phone: PhoneNumber | None = None
    password: str = Field(..., min_length=4)
    role: Role = Role.ASSISTANT
    account_state: AccountState = AccountState.ACTIVATED


class AssistantUpdate(BaseModel):
    """Schema for updating an assistant account."""

    name: str | None = Field(None, min_length=1, max_length=200)
    phone: PhoneNumber | None = None
    password: str | None = Field(None, min_length=4)
    role: Role | None = None
    account_state: AccountState | None = None


class AssistantResponse(BaseModel):
    """Assistant response schema (never includes the password hash)."""

    assistant_id: str
    name: str
    phone: str | None
    role: Role
    account_state: AccountState
    created_at: datetime

    model_config = {"from_attributes": True}
