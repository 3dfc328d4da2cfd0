"""Payment routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.api.v1.routes.students import get_student_or_404
from tracker.core.database import get_db
from tracker.core.deps import CurrentUser
from tracker.models.student import Student
from tracker.schemas.payment import PaymentCreate, PaymentResponse
from tracker.services import payment as payment_service

router = APIRouter(prefix="/payments", tags=["Payments"])


def to_payment_response(student: Student) -> PaymentResponse:
    payment = student.payment or {}
    return PaymentResponse(
        student_id=student.id,
        student_name=student.name,
        number_of_sessions=payment.get("numberOfSessions"),
        cost=payment.get("cost"),
        payment_comment=payment.get("paymentComment"),
        date=payment.get("date"),
    )


@router.post("", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
async def save_payment(
    payment_data: PaymentCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser,
) -> PaymentResponse:
    """Save a student's payment, replacing the previous one."""
    student = await get_student_or_404(db, payment_data.student_id)

    await payment_service.save_payment(db, student, payment_data)
    return to_payment_response(student)


@router.delete("/{student_id}", response_model=PaymentResponse)
async def clear_payment(
    student_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser,
) -> PaymentResponse:
    """Clear a student's payment."""
    student = await get_student_or_404(db, student_id)

    await payment_service.clear_payment(db, student)
    return to_payment_response(student)
