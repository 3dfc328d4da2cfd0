"""Lesson write operations.

Every write follows the same path: open the student's lesson book, apply one
pure change to the targeted record (validating first, so a rejected change
never writes anything), persist the book, then refresh the history row for
that lesson with the fields the change touched.
"""

from collections.abc import Callable
from datetime import datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import flag_modified

from tracker.core.logging import get_logger
from tracker.models.student import Student
from tracker.schemas.lesson import EffectiveView
from tracker.schemas.validators import HomeworkDegree, HomeworkState, validate_quiz_degree
from tracker.services import history as history_service
from tracker.services.lesson_book import ByName, LessonBook, open_book
from tracker.services.resolver import resolve_book

logger = get_logger("lessons")


class LessonUpdateError(ValueError):
    """A lesson change that breaks a record rule; nothing was written."""


def format_timestamp(now: datetime) -> str:
    """12-hour clock time, e.g. ``3:07 PM``."""
    hour = now.hour % 12 or 12
    suffix = "PM" if now.hour >= 12 else "AM"
    return f"{hour}:{now:%M} {suffix}"


def format_attendance(now: datetime, center: str) -> str:
    """``DD/MM/YYYY in <center> at H:MM AM`` as shown on the attendance tables."""
    return f"{now:%d/%m/%Y} in {center} at {format_timestamp(now)}"


def canonical_selector(
    book: LessonBook,
    lesson: str | None,
    week: int | None,
    lesson_names: list[str],
    *,
    strict: bool = True,
) -> str | int | None:
    """Map a request's lesson / week onto the selector the book understands.

    Books keyed by lesson name have no week slots, so a week number there means
    the lesson at that position of the curriculum. With ``strict`` set, unknown
    lesson names and out-of-range weeks raise ``LessonUpdateError``.
    """
    if lesson is not None:
        if strict and lesson not in lesson_names and book.locate(lesson) is None:
            raise LessonUpdateError(f"Unknown lesson: {lesson}")
        return lesson
    if week is None:
        return None
    if isinstance(book, ByName) and book.locate(week) is None:
        if 1 <= week <= len(lesson_names):
            return lesson_names[week - 1]
        if strict:
            raise LessonUpdateError(f"There is no lesson for week {week}")
    return week


def _target(book: LessonBook, selector: str | int) -> tuple[Any, dict[str, Any]]:
    slot = book.locate(selector)
    if slot is None:
        slot = book.add(selector)
    return slot, dict(book.get(slot))


def _require_attended(record: dict[str, Any], what: str) -> None:
    if record.get("attended") is not True:
        raise LessonUpdateError(f"Student must be marked as attended before {what} can be updated")


def mark_attendance(
    book: LessonBook,
    selector: str | int,
    attended: bool,
    center: str | None = None,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Mark a lesson attended or not attended.

    Marking a lesson not attended clears everything that depends on being there:
    homework, homework degree, quiz degree and the paid flag.
    """
    slot, record = _target(book, selector)
    if attended:
        if not center:
            raise LessonUpdateError("A center is required when marking attendance")
        if record.get("attended") is not True:
            record.update(
                attended=True,
                lastAttendance=format_attendance(now or datetime.now(), center),
                lastAttendanceCenter=center,
            )
    else:
        record.update(
            attended=False,
            lastAttendance=None,
            lastAttendanceCenter=None,
            hwDone=False,
            homework_degree=None,
            quizDegree=None,
            paid=False,
        )
    book.set(slot, record)
    return record


def set_homework(
    book: LessonBook,
    selector: str | int,
    hw_done: HomeworkState,
    homework_degree: HomeworkDegree | None = None,
) -> dict[str, Any]:
    slot, record = _target(book, selector)
    if hw_done is not False:
        _require_attended(record, "homework")
    record["hwDone"] = hw_done
    record["homework_degree"] = homework_degree if hw_done is True else None
    book.set(slot, record)
    return record


def set_homework_degree(
    book: LessonBook,
    selector: str | int,
    homework_degree: HomeworkDegree | None,
) -> dict[str, Any]:
    """Record a homework degree; a degree implies the homework was done."""
    slot, record = _target(book, selector)
    if homework_degree is not None:
        _require_attended(record, "homework degree")
        record["hwDone"] = True
    record["homework_degree"] = homework_degree
    book.set(slot, record)
    return record


def set_quiz_degree(book: LessonBook, selector: str | int, quiz_degree: str | None) -> dict[str, Any]:
    slot, record = _target(book, selector)
    if quiz_degree is not None:
        try:
            quiz_degree = validate_quiz_degree(quiz_degree)
        except ValueError as e:
            raise LessonUpdateError(str(e)) from e
        _require_attended(record, "quiz degree")
    record["quizDegree"] = quiz_degree
    book.set(slot, record)
    return record


def set_comment(book: LessonBook, selector: str | int, comment: str | None) -> dict[str, Any]:
    slot, record = _target(book, selector)
    record["comment"] = comment.strip() if comment and comment.strip() else None
    book.set(slot, record)
    return record


def set_message_state(
    book: LessonBook,
    selector: str | int,
    message_state: bool,
    is_student_message: bool = False,
) -> dict[str, Any]:
    slot, record = _target(book, selector)
    key = "student_message_state" if is_student_message else "parent_message_state"
    record[key] = message_state
    book.set(slot, record)
    return record


def set_paid(book: LessonBook, selector: str | int, paid: bool) -> dict[str, Any]:
    slot, record = _target(book, selector)
    if paid:
        _require_attended(record, "payment")
    record["paid"] = paid
    book.set(slot, record)
    return record


def history_fields(record: dict[str, Any], keys: tuple[str, ...]) -> dict[str, Any]:
    """Project a lesson record onto the history columns named in ``keys``."""
    homework_degree = record.get("homework_degree")
    legacy_message_state = bool(record.get("message_state", False))
    projection = {
        "attendance_date": record.get("lastAttendance"),
        "center": record.get("lastAttendanceCenter"),
        "hw_done": record.get("hwDone", False),
        "homework_degree": None if homework_degree is None else str(homework_degree),
        "quiz_degree": record.get("quizDegree"),
        "comment": record.get("comment"),
        "student_message_state": bool(record.get("student_message_state", legacy_message_state)),
        "parent_message_state": bool(record.get("parent_message_state", legacy_message_state)),
    }
    return {key: projection[key] for key in keys}


# History columns refreshed by each kind of write
ATTENDANCE_HISTORY = ("attendance_date", "center", "hw_done", "homework_degree", "quiz_degree")
HOMEWORK_HISTORY = ("hw_done", "homework_degree")
QUIZ_HISTORY = ("quiz_degree",)
COMMENT_HISTORY = ("comment",)
MESSAGE_HISTORY = ("student_message_state", "parent_message_state")


async def apply_lesson_update(
    db: AsyncSession,
    student: Student,
    selector: str | int,
    change: Callable[[LessonBook, str | int], dict[str, Any]],
    history_keys: tuple[str, ...] = (),
    recorded_by: str | None = None,
) -> EffectiveView:
    """Apply ``change`` to one lesson of ``student`` and persist it.

    Raises ``LessonUpdateError`` (before touching the database) when the
    change is not allowed.
    """
    book = open_book(student.lessons)
    record = change(book, selector)

    student.lessons = book.dump()
    flag_modified(student, "lessons")

    week = record.get("week") if isinstance(record.get("week"), int) else None
    history_key = record.get("lesson") or (selector if isinstance(selector, str) else None) or week
    if history_keys and history_key is not None:
        fields = history_fields(record, history_keys)
        if week is not None:
            fields["week"] = week
        await history_service.record_history(
            db, student.id, history_key, fields, recorded_by=recorded_by, commit=False
        )

    await db.commit()
    await db.refresh(student)

    logger.info("Updated lesson %r for student %s", selector, student.id)
    return resolve_book(book, selector)
