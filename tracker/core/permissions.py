"""Assistant roles."""

from enum import Enum


class Role(str, Enum):
    """Roles an assistant account can hold."""

    ADMIN = "admin"  # Manages assistant accounts
    ASSISTANT = "assistant"  # Day-to-day attendance and grading


class AccountState(str, Enum):
    """Account state shared by students and assistants."""

    ACTIVATED = "Activated"
    DEACTIVATED = "Deactivated"

