"""CLI commands for management tasks."""

import asyncio
import sys

from sqlalchemy import select
from sqlalchemy.orm.attributes import flag_modified

from tracker.core.config import settings
from tracker.core.database import async_session_maker
from tracker.core.logging import get_logger, setup_logging
from tracker.core.permissions import AccountState, Role
from tracker.core.security import get_password_hash
from tracker.models.assistant import Assistant
from tracker.models.student import Student
from tracker.services import student as student_service
from tracker.services.weeks import count_repairs, duplicate_weeks, normalize

logger = get_logger("cli")


async def create_admin(assistant_id: str, password: str, name: str) -> None:
    """Create the initial admin account."""
    async with async_session_maker() as db:
        result = await db.execute(
            select(Assistant).where(Assistant.assistant_id == assistant_id)
        )
        if result.scalar_one_or_none():
            print(f"Error: Assistant ID {assistant_id} is already registered!")
            sys.exit(1)

        admin = Assistant(
            assistant_id=assistant_id,
            name=name,
            password_hash=get_password_hash(password),
            role=Role.ADMIN.value,
            account_state=AccountState.ACTIVATED.value,
        )

        db.add(admin)
        await db.commit()
        await db.refresh(admin)

        print("Admin created successfully!")
        print(f"  ID: {admin.assistant_id}")
        print(f"  Name: {admin.name}")


async def fix_weeks() -> None:
    """Give every legacy week record a week number."""
    async with async_session_maker() as db:
        result = await db.execute(select(Student).order_by(Student.id))
        students = [s for s in result.scalars().all() if isinstance(s.lessons, list)]
        print(f"Checking {len(students)} students with week lists...")

        fixed_students = 0
        fixed_entries = 0
        for student in students:
            duplicates = duplicate_weeks(student.lessons)
            if duplicates:
                logger.warning(
                    "Student %s (%s) has duplicate weeks %s; left as they are",
                    student.id,
                    student.name,
                    duplicates,
                )

            repairs = count_repairs(student.lessons)
            if not repairs:
                continue

            student.lessons = normalize(student.lessons)
            flag_modified(student, "lessons")
            fixed_students += 1
            fixed_entries += repairs
            logger.info("Fixed student %s (%s): %s entries", student.id, student.name, repairs)

        await db.commit()
        print(f"Done! {fixed_students} students updated, {fixed_entries} week entries fixed.")


async def add_course_type(course_type: str) -> None:
    """Set a course type on every student that has none."""
    async with async_session_maker() as db:
        updated = await student_service.set_course_type_for_all(db, course_type)
        print(f"Done! {updated} students now have course type {course_type!r}.")


def main() -> None:
    """CLI entry point."""
    setup_logging(settings.LOG_LEVEL)

    if len(sys.argv) < 2:
        print("Usage: python -m tracker.cli <command>")
        print("Commands:")
        print("  create-admin <assistant_id> <password> <name>")
        print("  fix-weeks")
        print("  add-course-type <course_type>")
        sys.exit(1)

    command = sys.argv[1]

    if command == "create-admin":
        if len(sys.argv) != 5:
            print("Usage: python -m tracker.cli create-admin <assistant_id> <password> <name>")
            sys.exit(1)

        _, _, assistant_id, password, name = sys.argv
        asyncio.run(create_admin(assistant_id, password, name))
    elif command == "fix-weeks":
        asyncio.run(fix_weeks())
    elif command == "add-course-type":
        if len(sys.argv) != 3:
            print("Usage: python -m tracker.cli add-course-type <course_type>")
            sys.exit(1)

        asyncio.run(add_course_type(sys.argv[2]))
    else:
        print(f"Unknown command: {command}")
        sys.exit(1)


if __name__ == "__main__":
    main()
