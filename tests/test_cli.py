"""Tests for the management commands."""

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tests.conftest import make_assistant, make_student, test_session_maker
from tracker import cli
from tracker.core.permissions import Role
from tracker.core.security import verify_password
from tracker.models.assistant import Assistant
from tracker.models.student import Student


@pytest.fixture
def cli_db(setup_database, monkeypatch):
    """Point the commands at the test database."""
    monkeypatch.setattr(cli, "async_session_maker", test_session_maker)


async def reload_student(db: AsyncSession, student_id: int) -> Student:
    db.expire_all()
    result = await db.execute(select(Student).where(Student.id == student_id))
    return result.scalar_one()


class TestFixWeeks:
    async def test_fills_missing_weeks(self, cli_db, db: AsyncSession, capsys):
        await make_student(db, 1, lessons=[None, {"attended": True}, {"week": 1}])
        await make_student(db, 2, lessons={"If Conditions": {"attended": True}})

        await cli.fix_weeks()

        student = await reload_student(db, 1)
        assert [entry["week"] for entry in student.lessons] == [2, 3, 1]
        assert student.lessons[1]["attended"] is True
        assert "1 students updated, 2 week entries fixed" in capsys.readouterr().out

    async def test_reports_duplicates(self, cli_db, db: AsyncSession, caplog):
        await make_student(db, 1, lessons=[{"week": 2}, {"week": 2}])

        await cli.fix_weeks()

        assert "duplicate weeks [2]" in caplog.text
        student = await reload_student(db, 1)
        assert student.lessons == [{"week": 2}, {"week": 2}]


class TestAddCourseType:
    async def test_only_missing(self, cli_db, db: AsyncSession):
        await make_student(db, 1, course_type=None)
        await make_student(db, 2, course_type="advanced")

        await cli.add_course_type("basics")

        assert (await reload_student(db, 1)).course_type == "basics"
        assert (await reload_student(db, 2)).course_type == "advanced"


class TestCreateAdmin:
    async def test_create(self, cli_db, db: AsyncSession):
        await cli.create_admin("boss", "boss1234", "The Boss")

        result = await db.execute(select(Assistant).where(Assistant.assistant_id == "boss"))
        admin = result.scalar_one()
        assert admin.role == Role.ADMIN
        assert verify_password("boss1234", admin.password_hash)

    async def test_existing_id(self, cli_db, db: AsyncSession):
        await make_assistant(db, "boss", "boss1234")

        with pytest.raises(SystemExit):
            await cli.create_admin("boss", "other", "Other")
