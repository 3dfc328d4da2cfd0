"""Attendance history routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.database import get_db
from tracker.core.deps import CurrentUser
from tracker.models.history import HistoryRecord
from tracker.models.student import Student
from tracker.schemas.history import HistoryRecordResponse, StudentHistory
from tracker.services import history as history_service
from tracker.services import student as student_service

router = APIRouter(prefix="/history", tags=["History"])


def to_student_history(student: Student, records: list[HistoryRecord]) -> StudentHistory:
    """Join live student fields with historical rows."""
    return StudentHistory(
        id=student.id,
        name=student.name,
        grade=student.grade,
        course_type=student.course_type,
        main_center=student.main_center,
        main_comment=student.main_comment,
        school=student.school,
        phone=student.phone,
        history_records=[HistoryRecordResponse.model_validate(r) for r in records],
    )


@router.get("", response_model=list[StudentHistory])
async def list_history(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser,
    grade: str | None = Query(None, description="Student's current grade"),
    course_type: str | None = Query(None, description="Student's current course type"),
    center: str | None = Query(None, description="Center the attendance was recorded at"),
    lesson: str | None = Query(None, description="Lesson name"),
    week: int | None = Query(None, ge=1, description="Legacy week number"),
    search: str | None = Query(None, description="Id, phone, name or school"),
) -> list[StudentHistory]:
    """
    Attendance history of every active student that has any.

    Grade and course type filter on the student as it is now; center, lesson
    and week filter on the recorded rows.
    """
    rows = await history_service.get_history(
        db,
        grade=grade,
        course_type=course_type,
        center=center,
        lesson=lesson,
        week=week,
        search=search,
    )
    return [to_student_history(student, records) for student, records in rows]


@router.get("/{student_id}", response_model=StudentHistory)
async def get_student_history(
    student_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser,
) -> StudentHistory:
    """History of one student; 404 once the student no longer exists."""
    student = await student_service.get_student_by_id(db, student_id)

    if not student:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Student not found",
        )

    records = await history_service.get_student_history(db, student_id)
    return to_student_history(student, records)
