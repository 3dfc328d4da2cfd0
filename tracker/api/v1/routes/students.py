"""Student routes."""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.database import get_db
from tracker.core.deps import CurrentUser, SettingsDep
from tracker.core.permissions import AccountState
from tracker.models.student import Student
from tracker.schemas.lesson import LessonCountsResponse
from tracker.schemas.student import (
    SortField,
    StudentCreate,
    StudentDetail,
    StudentListResponse,
    StudentResponse,
    StudentSummary,
    StudentUpdate,
)
from tracker.services import student as student_service
from tracker.services.lesson_book import open_book
from tracker.services.lessons import canonical_selector
from tracker.services.resolver import resolve, resolve_book, summarize

router = APIRouter(prefix="/students", tags=["Students"])


# ============== Helper Functions ==============


async def get_student_or_404(db: AsyncSession, student_id: int) -> Student:
    """Load a student or raise 404."""
    student = await student_service.get_student_by_id(db, student_id)

    if not student:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Student not found",
        )

    return student


# ============== Endpoints ==============


@router.get("", response_model=StudentListResponse)
async def list_students(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser,
    search: str | None = Query(None, description="Search by name, school, phone or id"),
    grade: str | None = Query(None, description="Filter by grade"),
    center: str | None = Query(None, description="Filter by main center"),
    course_type: str | None = Query(None, description="Filter by course type"),
    account_state: AccountState | None = Query(None, description="Filter by account state"),
    sort_by: SortField = Query("id", description="Sort field"),
    sort_order: Literal["asc", "desc"] = Query("asc", description="Sort direction"),
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(50, ge=1, le=500, description="Max number of records"),
) -> StudentListResponse:
    """
    List students with optional filters.

    Each item carries its current lesson: the first attended lesson, else the
    first recorded one, else an empty week 1.
    """
    students, total = await student_service.get_students(
        db,
        search=search,
        grade=grade,
        center=center,
        course_type=course_type,
        account_state=account_state,
        sort_by=sort_by,
        descending=sort_order == "desc",
        skip=skip,
        limit=limit,
    )

    return StudentListResponse(
        items=[
            StudentSummary(**student_service.student_fields(s), current=resolve(s.lessons))
            for s in students
        ],
        total=total,
        skip=skip,
        limit=limit,
    )


@router.post("", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
async def create_student(
    student_data: StudentCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser,
) -> StudentResponse:
    """Create a new student. Without an id the next free id is used."""
    try:
        student = await student_service.create_student(db, student_data)
    except student_service.StudentIdTakenError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        )

    return StudentResponse.model_validate(student)


@router.get("/{student_id}", response_model=StudentDetail)
async def get_student(
    student_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser,
    app_settings: SettingsDep,
    lesson: str | None = Query(None, description="Lesson name to resolve"),
    week: int | None = Query(None, ge=1, description="Legacy week number to resolve"),
) -> StudentDetail:
    """
    Get a student with one lesson resolved.

    Without ``lesson`` or ``week`` the current lesson is resolved. Works for
    deactivated students too.
    """
    student = await get_student_or_404(db, student_id)

    book = open_book(student.lessons)
    selector = canonical_selector(book, lesson, week, app_settings.LESSON_NAMES, strict=False)
    counts = summarize(student.lessons)

    return StudentDetail(
        **student_service.student_fields(student),
        lessons=student.lessons,
        payment=student.payment,
        mock_exams=student.mock_exams,
        view=resolve_book(book, selector),
        counts=LessonCountsResponse.model_validate(counts),
    )


@router.patch("/{student_id}", response_model=StudentResponse)
async def update_student(
    student_id: int,
    student_data: StudentUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser,
) -> StudentResponse:
    """Update a student's profile fields."""
    student = await get_student_or_404(db, student_id)

    updated_student = await student_service.update_student(db, student, student_data)
    return StudentResponse.model_validate(updated_student)


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_student(
    student_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser,
) -> None:
    """Delete a student and its history."""
    student = await get_student_or_404(db, student_id)

    await student_service.delete_student(db, student)
