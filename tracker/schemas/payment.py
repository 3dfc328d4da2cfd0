"""Payment schemas."""

from pydantic import BaseModel, ConfigDict, Field


class PaymentCreate(BaseModel):
    """Schema for saving a student's payment snapshot."""

    model_config = ConfigDict(populate_by_name=True)

    student_id: int = Field(..., ge=1, alias="studentId")
    number_of_sessions: int = Field(..., gt=0, alias="numberOfSessions")
    cost: float = Field(..., gt=0)
    payment_comment: str | None = Field(None, alias="paymentComment", max_length=1000)


class PaymentResponse(BaseModel):
    """The stored payment snapshot."""

    model_config = ConfigDict(populate_by_name=True)

    student_id: int = Field(alias="studentId")
    student_name: str = Field(alias="studentName")
    number_of_sessions: int | None = Field(alias="numberOfSessions")
    cost: float | None
    payment_comment: str | None = Field(alias="paymentComment")
    date: str | None
