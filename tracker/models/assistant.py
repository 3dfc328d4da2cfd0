"""Assistant model."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from tracker.core.database import TimestampedModel
from tracker.core.permissions import AccountState, Role


class Assistant(TimestampedModel):
    """Staff account used to log in to the dashboard."""

    __tablename__ = "assistants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    assistant_id: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50))
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[Role] = mapped_column(
        String(20),
        nullable=False,
        default=Role.ASSISTANT,
    )
    account_state: Mapped[AccountState] = mapped_column(
        String(20),
        nullable=False,
        default=AccountState.ACTIVATED,
        server_default=AccountState.ACTIVATED.value,
    )

    def __repr__(self) -> str:
        return f"<Assistant(id={self.assistant_id}, role={self.role})>"
