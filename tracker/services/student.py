"""Student service."""

from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.permissions import AccountState
from tracker.models.student import Student, empty_mock_exams, empty_payment
from tracker.schemas.student import StudentCreate, StudentUpdate
from tracker.services import history as history_service

SORTABLE_FIELDS = {
    "id": Student.id,
    "name": Student.name,
    "grade": Student.grade,
    "main_center": Student.main_center,
    "created_at": Student.created_at,
}


class StudentIdTakenError(ValueError):
    """The requested student id already belongs to another student."""


async def get_student_by_id(db: AsyncSession, student_id: int) -> Student | None:
    """Get student by ID."""
    result = await db.execute(select(Student).where(Student.id == student_id))
    return result.scalar_one_or_none()


async def get_students(
    db: AsyncSession,
    *,
    search: str | None = None,
    grade: str | None = None,
    center: str | None = None,
    course_type: str | None = None,
    account_state: AccountState | None = None,
    sort_by: str = "id",
    descending: bool = False,
    skip: int = 0,
    limit: int = 50,
) -> tuple[list[Student], int]:
    """Get list of students with optional filters."""
    filters = []

    if search:
        term = search.strip()
        conditions = [
            Student.name.ilike(f"%{term}%"),
            Student.school.ilike(f"%{term}%"),
            Student.phone.ilike(f"%{term}%"),
            Student.parents_phone_1.ilike(f"%{term}%"),
            Student.parents_phone_2.ilike(f"%{term}%"),
        ]
        if term.isdigit():
            conditions.append(Student.id == int(term))
        filters.append(or_(*conditions))

    if grade:
        filters.append(Student.grade.ilike(f"%{grade.strip()}%"))

    if center:
        filters.append(Student.main_center.ilike(f"%{center.strip()}%"))

    if course_type:
        filters.append(func.lower(Student.course_type) == course_type.strip().lower())

    if account_state is not None:
        filters.append(Student.account_state == account_state.value)

    count_query = select(func.count()).select_from(Student).where(*filters)
    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    order_column = SORTABLE_FIELDS.get(sort_by, Student.id)
    order = order_column.desc() if descending else order_column.asc()
    query = select(Student).where(*filters).order_by(order, Student.id).offset(skip).limit(limit)
    result = await db.execute(query)
    students = list(result.scalars().all())

    return students, total


async def next_student_id(db: AsyncSession) -> int:
    """One past the highest id in use."""
    result = await db.execute(select(func.max(Student.id)))
    return (result.scalar() or 0) + 1


async def create_student(db: AsyncSession, student_data: StudentCreate) -> Student:
    """Create a new student with an empty lesson book.

    Raises ``StudentIdTakenError`` when an explicit id is already used.
    """
    if student_data.id is not None:
        if await get_student_by_id(db, student_data.id):
            raise StudentIdTakenError("This ID is used, please use another ID")
        student_id = student_data.id
    else:
        student_id = await next_student_id(db)

    student = Student(
        id=student_id,
        **student_data.model_dump(exclude={"id"}, mode="json"),
        lessons={},
        payment=empty_payment(),
        mock_exams=empty_mock_exams(),
    )

    db.add(student)
    await db.commit()
    await db.refresh(student)

    return student


async def update_student(
    db: AsyncSession,
    student: Student,
    student_data: StudentUpdate,
) -> Student:
    """Update a student."""
    update_data = student_data.model_dump(exclude_unset=True, mode="json")

    for field, value in update_data.items():
        setattr(student, field, value)

    await db.commit()
    await db.refresh(student)

    return student


async def delete_student(db: AsyncSession, student: Student) -> None:
    """Delete a student together with its history."""
    await history_service.delete_student_history(db, student.id)
    await db.delete(student)
    await db.commit()


async def set_course_type_for_all(db: AsyncSession, course_type: str, *, overwrite: bool = False) -> int:
    """Give every student (or only those without one) a course type."""
    query = select(Student)
    if not overwrite:
        query = query.where(Student.course_type.is_(None))
    result = await db.execute(query)
    students = list(result.scalars().all())
    for student in students:
        student.course_type = course_type
    await db.commit()
    return len(students)


def student_fields(student: Student) -> dict[str, Any]:
    """Profile fields of a student keyed by schema field name."""
    return {
        "id": student.id,
        "name": student.name,
        "phone": student.phone,
        "parents_phone_1": student.parents_phone_1,
        "parents_phone_2": student.parents_phone_2,
        "school": student.school,
        "address": student.address,
        "age": student.age,
        "grade": student.grade,
        "main_center": student.main_center,
        "course": student.course,
        "course_type": student.course_type,
        "account_state": student.account_state,
        "main_comment": student.main_comment,
        "created_at": student.created_at,
        "updated_at": student.updated_at,
    }
