"""Student model."""

from typing import Any

from sqlalchemy import JSON, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from tracker.core.database import TimestampedModel
from tracker.core.permissions import AccountState

MOCK_EXAM_SLOTS = 10


def empty_mock_exams() -> list[dict[str, Any]]:
    """Fresh list of unrecorded mock exam slots."""
    return [
        {"examDegree": None, "outOf": None, "percentage": None, "date": None}
        for _ in range(MOCK_EXAM_SLOTS)
    ]


def empty_payment() -> dict[str, Any]:
    """Payment snapshot with nothing recorded."""
    return {"numberOfSessions": None, "cost": None, "paymentComment": None, "date": None}


class Student(TimestampedModel):
    """Student document: profile fields plus the embedded lesson book."""

    __tablename__ = "students"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    phone: Mapped[str | None] = mapped_column(String(50))
    parents_phone_1: Mapped[str | None] = mapped_column(String(50))
    parents_phone_2: Mapped[str | None] = mapped_column(String(50))
    school: Mapped[str | None] = mapped_column(String(200))
    address: Mapped[str | None] = mapped_column(String(500))
    age: Mapped[int | None] = mapped_column(Integer)
    grade: Mapped[str | None] = mapped_column(String(50))
    main_center: Mapped[str | None] = mapped_column(String(100), index=True)
    course: Mapped[str | None] = mapped_column(String(50))
    course_type: Mapped[str | None] = mapped_column(String(50))
    account_state: Mapped[AccountState] = mapped_column(
        String(20),
        nullable=False,
        default=AccountState.ACTIVATED,
        server_default=AccountState.ACTIVATED.value,
    )
    main_comment: Mapped[str | None] = mapped_column(Text)

    # Mapping of lesson name -> record, or a legacy list of week records
    lessons: Mapped[Any] = mapped_column(JSON, nullable=False, default=dict)
    payment: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=empty_payment)
    mock_exams: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON,
        nullable=False,
        default=empty_mock_exams,
    )

    @property
    def is_active(self) -> bool:
        return self.account_state != AccountState.DEACTIVATED

    def __repr__(self) -> str:
        return f"<Student(id={self.id}, name={self.name})>"
