"""Authentication schemas."""

from pydantic import BaseModel, Field


class Token(BaseModel):
    """JWT token response."""

    access_token: str
    token_type: str = "bearer"


class LoginRequest(BaseModel):
    """Login request schema."""

    assistant_id: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1)
