"""Payment service - the per-student payment snapshot."""

from datetime import datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import flag_modified

from tracker.models.student import Student, empty_payment
from tracker.schemas.payment import PaymentCreate
from tracker.services.lessons import format_timestamp


def format_payment_date(now: datetime) -> str:
    """``MM/DD/YYYY at H:MM AM``."""
    return f"{now:%m/%d/%Y} at {format_timestamp(now)}"


async def save_payment(
    db: AsyncSession,
    student: Student,
    payment_data: PaymentCreate,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Replace the student's payment snapshot; previous payments are not kept."""
    comment = payment_data.payment_comment
    student.payment = {
        "numberOfSessions": payment_data.number_of_sessions,
        "cost": payment_data.cost,
        "paymentComment": comment.strip() if comment and comment.strip() else None,
        "date": format_payment_date(now or datetime.now()),
    }
    flag_modified(student, "payment")

    await db.commit()
    await db.refresh(student)

    return student.payment


async def clear_payment(db: AsyncSession, student: Student) -> dict[str, Any]:
    """Reset the payment snapshot to nothing recorded."""
    student.payment = empty_payment()
    flag_modified(student, "payment")

    await db.commit()
    await db.refresh(student)

    return student.payment
