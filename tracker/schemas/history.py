"""History schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class HistoryRecordResponse(BaseModel):
    """One recorded lesson interaction, as it was at the time."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    lesson: str | None
    week: int | None
    attendance_date: str | None = Field(alias="attendanceDate")
    center: str | None
    hw_done: Any = Field(alias="hwDone")
    homework_degree: str | None
    quiz_degree: str | None = Field(alias="quizDegree")
    comment: str | None
    student_message_state: bool
    parent_message_state: bool
    recorded_by: str | None


class StudentHistory(BaseModel):
    """A student's current profile fields joined with its history rows."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    grade: str | None
    course_type: str | None = Field(alias="courseType")
    main_center: str | None
    main_comment: str | None
    school: str | None
    phone: str | None
    history_records: list[HistoryRecordResponse] = Field(alias="historyRecords")
