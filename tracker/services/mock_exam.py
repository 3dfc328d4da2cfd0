"""Mock exam service."""

from datetime import datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import flag_modified

from tracker.models.student import MOCK_EXAM_SLOTS, Student, empty_mock_exams
from tracker.schemas.mock_exam import MockExamCreate
from tracker.services.lessons import format_timestamp


def format_exam_date(now: datetime) -> str:
    """``DD/MM/YYYY at H:MM AM``."""
    return f"{now:%d/%m/%Y} at {format_timestamp(now)}"


def exam_percentage(exam_degree: float, out_of: float) -> float:
    return round(exam_degree / out_of * 100, 2)


async def save_mock_exam(
    db: AsyncSession,
    student: Student,
    exam_data: MockExamCreate,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Store one mock exam result in its slot, leaving the other slots alone."""
    exams = list(student.mock_exams or [])
    if len(exams) != MOCK_EXAM_SLOTS:
        # Missing or malformed slots from older records
        exams = (exams + empty_mock_exams())[:MOCK_EXAM_SLOTS]

    percentage = exam_data.percentage
    if percentage is None:
        percentage = exam_percentage(exam_data.exam_degree, exam_data.out_of)

    exam = {
        "examDegree": exam_data.exam_degree,
        "outOf": exam_data.out_of,
        "percentage": percentage,
        "date": format_exam_date(now or datetime.now()),
    }
    exams[exam_data.exam_index] = exam
    student.mock_exams = exams
    flag_modified(student, "mock_exams")

    await db.commit()
    await db.refresh(student)

    return exam
