"""Attendance state resolution.

Turns a student's stored lesson records into the fully defaulted view the
dashboard renders, and computes the per-student absence/homework/quiz counts.
"""

from dataclasses import dataclass
from typing import Any

from tracker.schemas.lesson import EffectiveView
from tracker.schemas.validators import QUIZ_ABSENT
from tracker.services.lesson_book import LessonBook, LessonSelector, open_book

HW_NONE = "No Homework"
HW_INCOMPLETE = "Not Completed"
HW_SENTINELS = (HW_NONE, HW_INCOMPLETE)


@dataclass(frozen=True)
class LessonCounts:
    """Per-student aggregates shown next to the attendance tables."""

    absences: int
    missing_homework: int
    unattended_quizzes: int


def display_quiz_degree(quiz_degree: str | None) -> str:
    """Text shown for a quiz degree; an unrecorded quiz reads as 0/0."""
    if quiz_degree is None:
        return "0/0"
    return quiz_degree


def _text(value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    return str(value)


def _degree(value: Any) -> str | int | float | None:
    if value is None or (isinstance(value, (str, int, float)) and not isinstance(value, bool)):
        return value
    return str(value)


def _homework_state(value: Any) -> bool | str:
    if value is True or value is False or (isinstance(value, str) and value in HW_SENTINELS):
        return value
    return False


def _view(record: dict[str, Any], lesson: Any, week: int | None) -> EffectiveView:
    # Legacy records hold numbers and other junk where text is expected
    hw_done = _homework_state(record.get("hwDone", False))
    legacy_message_state = bool(record.get("message_state", False))
    quiz_degree = _text(record.get("quizDegree"))
    return EffectiveView(
        lesson=_text(lesson),
        week=week,
        attended_the_session=record.get("attended") is True,
        last_attendance=_text(record.get("lastAttendance")),
        last_attendance_center=_text(record.get("lastAttendanceCenter")),
        hw_done=hw_done,
        homework_degree=_degree(record.get("homework_degree")) if hw_done is True else None,
        quiz_degree=quiz_degree,
        quiz_display=display_quiz_degree(quiz_degree),
        comment=_text(record.get("comment")),
        student_message_state=bool(record.get("student_message_state", legacy_message_state)),
        parent_message_state=bool(record.get("parent_message_state", legacy_message_state)),
        paid=record.get("paid") is True,
    )


def _week_of(record: dict[str, Any]) -> int | None:
    week = record.get("week")
    return week if isinstance(week, int) and not isinstance(week, bool) else None


def resolve_book(book: LessonBook, selector: LessonSelector = None) -> EffectiveView:
    """Resolve against an already opened lesson book."""
    if selector is not None:
        found = book.find(selector)
        if found is None:
            if isinstance(selector, str):
                return _view({}, lesson=selector, week=None)
            return _view({}, lesson=None, week=selector)
        label, record = found
        return _view(record, lesson=record.get("lesson") or label, week=_week_of(record))

    entries = list(book.items())
    if not entries:
        return _view({}, lesson=None, week=1)
    for label, record in entries:
        if record.get("attended") is True:
            return _view(record, lesson=record.get("lesson") or label, week=_week_of(record))
    label, record = entries[0]
    return _view(record, lesson=record.get("lesson") or label, week=_week_of(record))


def resolve(lessons: Any, selector: LessonSelector = None) -> EffectiveView:
    """Effective view of one lesson, or of the "current" lesson when no selector is given.

    A lesson without a record is not an error: it resolves to a zero-value view
    that echoes the selector. With no selector the first attended record wins,
    then the first stored record, then a zero-value view for week 1.
    """
    return resolve_book(open_book(lessons), selector)


def summarize(lessons: Any) -> LessonCounts:
    """Count absences, missing homework and unattended quizzes.

    ``missing_homework`` counts every record with ``hwDone`` false, including
    lessons that were never attended.
    """
    records = open_book(lessons).records()
    return LessonCounts(
        absences=sum(1 for record in records if record.get("attended") is False),
        missing_homework=sum(1 for record in records if record.get("hwDone") is False),
        unattended_quizzes=sum(
            1
            for record in records
            if record.get("quizDegree") is None or record.get("quizDegree") == QUIZ_ABSENT
        ),
    )
