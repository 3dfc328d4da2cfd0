"""Mock exam schemas."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from tracker.models.student import MOCK_EXAM_SLOTS


class MockExamCreate(BaseModel):
    """Schema for recording one mock exam result."""

    model_config = ConfigDict(populate_by_name=True)

    student_id: int = Field(..., ge=1, alias="studentId")
    exam_index: int = Field(..., ge=0, le=MOCK_EXAM_SLOTS - 1, alias="examIndex")
    exam_degree: float = Field(..., ge=0, alias="examDegree")
    out_of: float = Field(..., gt=0, alias="outOf")
    percentage: float | None = Field(None, ge=0, le=100)

    @model_validator(mode="after")
    def validate_degree(self) -> "MockExamCreate":
        """Degree cannot exceed the maximum."""
        if self.exam_degree > self.out_of:
            raise ValueError("examDegree cannot exceed outOf")
        return self


class MockExamResult(BaseModel):
    """One mock exam slot."""

    model_config = ConfigDict(populate_by_name=True)

    exam_degree: float | None = Field(None, alias="examDegree")
    out_of: float | None = Field(None, alias="outOf")
    percentage: float | None = None
    date: str | None = None


class MockExamResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    student_id: int = Field(alias="studentId")
    exam_index: int = Field(alias="examIndex")
    exam: MockExamResult
