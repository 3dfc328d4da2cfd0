"""History service - per-lesson history rows and the history browser."""

from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.logging import get_logger
from tracker.core.permissions import AccountState
from tracker.models.history import HistoryRecord
from tracker.models.student import Student

logger = get_logger("history")

HISTORY_FIELDS = (
    "week",
    "attendance_date",
    "center",
    "hw_done",
    "homework_degree",
    "quiz_degree",
    "comment",
    "student_message_state",
    "parent_message_state",
)


def merge_history_fields(record: HistoryRecord, fields: dict[str, Any]) -> HistoryRecord:
    """Overwrite only the history columns present in ``fields``."""
    for field, value in fields.items():
        if field not in HISTORY_FIELDS:
            raise ValueError(f"Unknown history field: {field}")
        setattr(record, field, value)
    return record


async def get_history_record(
    db: AsyncSession,
    student_id: int,
    selector: str | int,
) -> HistoryRecord | None:
    """Get the history row for one (student, lesson or week)."""
    query = select(HistoryRecord).where(HistoryRecord.student_id == student_id)
    if isinstance(selector, str):
        query = query.where(HistoryRecord.lesson == selector)
    else:
        query = query.where(HistoryRecord.lesson.is_(None), HistoryRecord.week == selector)
    result = await db.execute(query.order_by(HistoryRecord.id).limit(1))
    return result.scalar_one_or_none()


async def record_history(
    db: AsyncSession,
    student_id: int,
    selector: str | int,
    fields: dict[str, Any],
    *,
    recorded_by: str | None = None,
    commit: bool = True,
) -> HistoryRecord:
    """Create or refresh the history row for (student, selector).

    Calling it again for the same pair updates that row in place; columns not
    named in ``fields`` keep their previous values.
    """
    record = await get_history_record(db, student_id, selector)
    if record is None:
        record = HistoryRecord(
            student_id=student_id,
            lesson=selector if isinstance(selector, str) else None,
            week=selector if isinstance(selector, int) else None,
            hw_done=False,
            student_message_state=False,
            parent_message_state=False,
        )
        db.add(record)
        logger.info("Created history for student %s lesson %r", student_id, selector)

    merge_history_fields(record, fields)
    if recorded_by is not None:
        record.recorded_by = recorded_by

    if commit:
        await db.commit()
        await db.refresh(record)
    else:
        await db.flush()

    return record


async def delete_student_history(db: AsyncSession, student_id: int) -> int:
    """Delete every history row of a student. Does not commit."""
    result = await db.execute(
        delete(HistoryRecord).where(HistoryRecord.student_id == student_id)
    )
    return result.rowcount or 0


def _matches_search(student: Student, term: str) -> bool:
    """Digits match the id exactly or a phone by substring; text matches name/school."""
    if term.isdigit():
        phones = (student.phone, student.parents_phone_1, student.parents_phone_2)
        return str(student.id) == term or any(term in (phone or "") for phone in phones)
    lowered = term.lower()
    return lowered in (student.name or "").lower() or lowered in (student.school or "").lower()


async def get_history(
    db: AsyncSession,
    *,
    grade: str | None = None,
    course_type: str | None = None,
    center: str | None = None,
    lesson: str | None = None,
    week: int | None = None,
    search: str | None = None,
) -> list[tuple[Student, list[HistoryRecord]]]:
    """Students with history, joined with their current profile fields.

    Grade and course type are matched against the student as it is now, so
    editing a student moves all of its history with it. Center, lesson and
    week are matched against each history row as it was recorded.
    """
    student_query = select(Student).where(
        Student.account_state != AccountState.DEACTIVATED.value,
        Student.id.in_(select(HistoryRecord.student_id)),
    )
    if grade:
        student_query = student_query.where(func.lower(Student.grade) == grade.lower())
    if course_type:
        student_query = student_query.where(func.lower(Student.course_type) == course_type.lower())

    result = await db.execute(student_query.order_by(Student.id))
    students = [s for s in result.scalars().all() if not search or _matches_search(s, search.strip())]
    if not students:
        return []

    record_query = select(HistoryRecord).where(
        HistoryRecord.student_id.in_([s.id for s in students])
    )
    if center:
        record_query = record_query.where(func.lower(HistoryRecord.center) == center.lower())
    if lesson:
        record_query = record_query.where(HistoryRecord.lesson == lesson)
    if week is not None:
        record_query = record_query.where(HistoryRecord.week == week)

    result = await db.execute(record_query.order_by(HistoryRecord.id))
    by_student: dict[int, list[HistoryRecord]] = {}
    for record in result.scalars().all():
        by_student.setdefault(record.student_id, []).append(record)

    return [(s, by_student[s.id]) for s in students if s.id in by_student]


async def get_student_history(db: AsyncSession, student_id: int) -> list[HistoryRecord]:
    """All history rows of one student, oldest first."""
    result = await db.execute(
        select(HistoryRecord)
        .where(HistoryRecord.student_id == student_id)
        .order_by(HistoryRecord.id)
    )
    return list(result.scalars().all())
