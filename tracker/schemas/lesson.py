"""Lesson view and lesson update schemas."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from tracker.schemas.validators import HomeworkDegree, HomeworkState, QuizDegree


class EffectiveView(BaseModel):
    """Fully defaulted view of one lesson record."""

    model_config = ConfigDict(populate_by_name=True)

    lesson: str | None = None
    week: int | None = None
    attended_the_session: bool = False
    last_attendance: str | None = Field(None, alias="lastAttendance")
    last_attendance_center: str | None = Field(None, alias="lastAttendanceCenter")
    hw_done: HomeworkState = Field(False, alias="hwDone")
    homework_degree: HomeworkDegree | None = None
    quiz_degree: str | None = Field(None, alias="quizDegree")
    quiz_display: str = Field("0/0", alias="quizDisplay")
    comment: str | None = None
    student_message_state: bool = False
    parent_message_state: bool = False
    paid: bool = False


class LessonCountsResponse(BaseModel):
    """Absence / homework / quiz counters for one student."""

    absences: int
    missing_homework: int
    unattended_quizzes: int

    model_config = {"from_attributes": True}


class LessonTarget(BaseModel):
    """Identifies the lesson a write applies to: a lesson name or a legacy week."""

    model_config = ConfigDict(populate_by_name=True)

    lesson: str | None = Field(None, min_length=1, max_length=200)
    week: int | None = Field(None, ge=1)

    @model_validator(mode="after")
    def validate_target(self) -> "LessonTarget":
        """Exactly one of lesson / week must be given."""
        if (self.lesson is None) == (self.week is None):
            raise ValueError("Provide exactly one of 'lesson' or 'week'")
        return self


class AttendanceUpdate(LessonTarget):
    """Mark a lesson attended (at a center) or not attended."""

    attended: bool
    center: str | None = Field(None, min_length=1, max_length=100)

    @model_validator(mode="after")
    def validate_center(self) -> "AttendanceUpdate":
        """Attendance is always recorded at a center."""
        if self.attended and not self.center:
            raise ValueError("center is required when marking attendance")
        return self


class HomeworkUpdate(LessonTarget):
    hw_done: HomeworkState = Field(..., alias="hwDone")
    homework_degree: HomeworkDegree | None = None


class HomeworkDegreeUpdate(LessonTarget):
    homework_degree: HomeworkDegree | None


class QuizDegreeUpdate(LessonTarget):
    quiz_degree: QuizDegree | None = Field(..., alias="quizDegree")


class CommentUpdate(LessonTarget):
    comment: str | None = Field(None, max_length=2000)


class MessageStateUpdate(LessonTarget):
    message_state: bool
    is_student_message: bool = Field(False, alias="isStudentMessage")


class PaidUpdate(LessonTarget):
    paid: bool
