"""Attendance history model."""

from typing import Any

from sqlalchemy import JSON, Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from tracker.core.database import TimestampedModel


class HistoryRecord(TimestampedModel):
    """One (student, lesson) interaction kept for the history browser.

    ``student_id`` is not a foreign key: rows may outlive the student they
    point at, so readers must handle a missing student.
    """

    __tablename__ = "history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    lesson: Mapped[str | None] = mapped_column(String(200), index=True)
    week: Mapped[int | None] = mapped_column(Integer)

    attendance_date: Mapped[str | None] = mapped_column(String(100))
    center: Mapped[str | None] = mapped_column(String(100))
    # True / False / "Not Completed" / "No Homework"
    hw_done: Mapped[Any] = mapped_column(JSON, nullable=True)
    homework_degree: Mapped[str | None] = mapped_column(String(50))
    quiz_degree: Mapped[str | None] = mapped_column(String(50))
    comment: Mapped[str | None] = mapped_column(Text)
    student_message_state: Mapped[bool] = mapped_column(Boolean, default=False)
    parent_message_state: Mapped[bool] = mapped_column(Boolean, default=False)
    recorded_by: Mapped[str | None] = mapped_column(String(50))

    def __repr__(self) -> str:
        return f"<HistoryRecord(student_id={self.student_id}, lesson={self.lesson}, week={self.week})>"
