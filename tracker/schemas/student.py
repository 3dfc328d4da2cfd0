"""Student schemas."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from tracker.core.permissions import AccountState
from tracker.schemas.lesson import EffectiveView, LessonCountsResponse
from tracker.schemas.validators import PhoneNumber


class StudentCreate(BaseModel):
    """Schema for creating a new student."""

    model_config = ConfigDict(populate_by_name=True)

    id: int | None = Field(None, ge=1, description="Leave empty to use the next free id")
    name: str = Field(..., min_length=1, max_length=200)
    phone: PhoneNumber | None = None
    parents_phone_1: PhoneNumber | None = Field(None, alias="parentsPhone1")
    parents_phone_2: PhoneNumber | None = Field(None, alias="parentsPhone2")
    school: str | None = Field(None, max_length=200)
    address: str | None = Field(None, max_length=500)
    age: int | None = Field(None, ge=1, le=100)
    grade: str | None = Field(None, max_length=50)
    main_center: str = Field(..., min_length=1, max_length=100)
    course: str | None = Field(None, max_length=50)
    course_type: str | None = Field(None, alias="courseType", max_length=50)
    account_state: AccountState = AccountState.ACTIVATED
    main_comment: str | None = Field(None, max_length=2000)


class StudentUpdate(BaseModel):
    """Schema for updating a student."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(None, min_length=1, max_length=200)
    phone: PhoneNumber | None = None
    parents_phone_1: PhoneNumber | None = Field(None, alias="parentsPhone1")
    parents_phone_2: PhoneNumber | None = Field(None, alias="parentsPhone2")
    school: str | None = Field(None, max_length=200)
    address: str | None = Field(None, max_length=500)
    age: int | None = Field(None, ge=1, le=100)
    grade: str | None = Field(None, max_length=50)
    main_center: str | None = Field(None, min_length=1, max_length=100)
    course: str | None = Field(None, max_length=50)
    course_type: str | None = Field(None, alias="courseType", max_length=50)
    account_state: AccountState | None = None
    main_comment: str | None = Field(None, max_length=2000)


class StudentResponse(BaseModel):
    """Student response schema."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    name: str
    phone: str | None
    parents_phone_1: str | None = Field(alias="parentsPhone1")
    parents_phone_2: str | None = Field(alias="parentsPhone2")
    school: str | None
    address: str | None
    age: int | None
    grade: str | None
    main_center: str | None
    course: str | None
    course_type: str | None = Field(alias="courseType")
    account_state: AccountState
    main_comment: str | None
    created_at: datetime
    updated_at: datetime


class StudentSummary(StudentResponse):
    """List item: the student plus its current lesson."""

    current: EffectiveView


class StudentDetail(StudentResponse):
    """Student with its lessons, the resolved lesson and the aggregate counts."""

    lessons: Any
    payment: dict[str, Any]
    mock_exams: list[dict[str, Any]] = Field(alias="mockExams")
    view: EffectiveView
    counts: LessonCountsResponse


class StudentListResponse(BaseModel):
    """Paginated list of students."""

    items: list[StudentSummary]
    total: int
    skip: int
    limit: int


SortField = Literal["id", "name", "grade", "main_center", "created_at"]
