"""Per-lesson write routes: attendance, homework, quiz, comment, messages, paid."""

from collections.abc import Callable
from functools import partial
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.api.v1.routes.students import get_student_or_404
from tracker.core.database import get_db
from tracker.core.deps import CurrentUser, SettingsDep
from tracker.models.assistant import Assistant
from tracker.schemas.lesson import (
    AttendanceUpdate,
    CommentUpdate,
    EffectiveView,
    HomeworkDegreeUpdate,
    HomeworkUpdate,
    LessonTarget,
    MessageStateUpdate,
    PaidUpdate,
    QuizDegreeUpdate,
)
from tracker.services import lessons as lesson_service
from tracker.services.lesson_book import open_book

router = APIRouter(prefix="/students", tags=["Lessons"])


# ============== Helper Functions ==============


async def update_lesson(
    db: AsyncSession,
    student_id: int,
    target: LessonTarget,
    change: Callable[..., dict[str, Any]],
    history_keys: tuple[str, ...],
    current_user: Assistant,
    lesson_names: list[str],
) -> EffectiveView:
    """Load the student, apply one lesson change and return the re-resolved lesson."""
    student = await get_student_or_404(db, student_id)

    if not student.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Student account is deactivated",
        )

    try:
        selector = lesson_service.canonical_selector(
            open_book(student.lessons), target.lesson, target.week, lesson_names
        )
        return await lesson_service.apply_lesson_update(
            db,
            student,
            selector,
            change,
            history_keys=history_keys,
            recorded_by=current_user.assistant_id,
        )
    except lesson_service.LessonUpdateError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


# ============== Endpoints ==============


@router.post("/{student_id}/attend", response_model=EffectiveView)
async def toggle_attendance(
    student_id: int,
    data: AttendanceUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser,
    app_settings: SettingsDep,
) -> EffectiveView:
    """
    Mark a lesson attended at a center, or not attended.

    Marking not attended also clears homework, quiz degree and the paid flag.
    """
    return await update_lesson(
        db,
        student_id,
        data,
        partial(lesson_service.mark_attendance, attended=data.attended, center=data.center),
        lesson_service.ATTENDANCE_HISTORY,
        current_user,
        app_settings.LESSON_NAMES,
    )


@router.post("/{student_id}/hw", response_model=EffectiveView)
async def update_homework(
    student_id: int,
    data: HomeworkUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser,
    app_settings: SettingsDep,
) -> EffectiveView:
    """Set the homework state of an attended lesson."""
    return await update_lesson(
        db,
        student_id,
        data,
        partial(
            lesson_service.set_homework,
            hw_done=data.hw_done,
            homework_degree=data.homework_degree,
        ),
        lesson_service.HOMEWORK_HISTORY,
        current_user,
        app_settings.LESSON_NAMES,
    )


@router.post("/{student_id}/homework_degree", response_model=EffectiveView)
async def update_homework_degree(
    student_id: int,
    data: HomeworkDegreeUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser,
    app_settings: SettingsDep,
) -> EffectiveView:
    """Set the homework degree of an attended lesson."""
    return await update_lesson(
        db,
        student_id,
        data,
        partial(lesson_service.set_homework_degree, homework_degree=data.homework_degree),
        lesson_service.HOMEWORK_HISTORY,
        current_user,
        app_settings.LESSON_NAMES,
    )


@router.post("/{student_id}/quiz_degree", response_model=EffectiveView)
async def update_quiz_degree(
    student_id: int,
    data: QuizDegreeUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser,
    app_settings: SettingsDep,
) -> EffectiveView:
    """Set the quiz degree ("x/y", "Didn't Attend The Quiz", "No Quiz" or null)."""
    return await update_lesson(
        db,
        student_id,
        data,
        partial(lesson_service.set_quiz_degree, quiz_degree=data.quiz_degree),
        lesson_service.QUIZ_HISTORY,
        current_user,
        app_settings.LESSON_NAMES,
    )


@router.post("/{student_id}/comment", response_model=EffectiveView)
async def update_comment(
    student_id: int,
    data: CommentUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser,
    app_settings: SettingsDep,
) -> EffectiveView:
    """Set the comment of one lesson. An empty comment clears it."""
    return await update_lesson(
        db,
        student_id,
        data,
        partial(lesson_service.set_comment, comment=data.comment),
        lesson_service.COMMENT_HISTORY,
        current_user,
        app_settings.LESSON_NAMES,
    )


@router.post("/{student_id}/update-message-state", response_model=EffectiveView)
async def update_message_state(
    student_id: int,
    data: MessageStateUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser,
    app_settings: SettingsDep,
) -> EffectiveView:
    """Record whether the student or parent message for a lesson was sent."""
    return await update_lesson(
        db,
        student_id,
        data,
        partial(
            lesson_service.set_message_state,
            message_state=data.message_state,
            is_student_message=data.is_student_message,
        ),
        lesson_service.MESSAGE_HISTORY,
        current_user,
        app_settings.LESSON_NAMES,
    )


@router.post("/{student_id}/paid", response_model=EffectiveView)
async def update_paid(
    student_id: int,
    data: PaidUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser,
    app_settings: SettingsDep,
) -> EffectiveView:
    """Mark an attended lesson as paid or unpaid."""
    return await update_lesson(
        db,
        student_id,
        data,
        partial(lesson_service.set_paid, paid=data.paid),
        (),
        current_user,
        app_settings.LESSON_NAMES,
    )
