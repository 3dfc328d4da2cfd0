"""Tests for the per-lesson write endpoints."""

import re

from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tests.conftest import auth_header, make_student
from tracker.core.permissions import AccountState
from tracker.models.history import HistoryRecord

LESSON = "If Conditions"
ATTENDANCE_PATTERN = re.compile(r"^\d{2}/\d{2}/\d{4} in Rehab Center at \d{1,2}:\d{2} (AM|PM)$")


async def post(client: AsyncClient, token: str, path: str, body: dict, student_id: int = 1):
    return await client.post(
        f"/api/v1/students/{student_id}/{path}",
        json=body,
        headers=auth_header(token),
    )


async def attend(client: AsyncClient, token: str, student_id: int = 1, **target):
    body = target or {"lesson": LESSON}
    body.update(attended=True, center="Rehab Center")
    return await post(client, token, "attend", body, student_id)


class TestAttendance:
    """Tests for POST /students/{id}/attend."""

    async def test_mark_attended(self, client: AsyncClient, assistant_token: str, student):
        """Test marking a lesson attended records the center and time."""
        response = await attend(client, assistant_token)

        assert response.status_code == 200
        data = response.json()
        assert data["lesson"] == LESSON
        assert data["attended_the_session"] is True
        assert data["lastAttendanceCenter"] == "Rehab Center"
        assert ATTENDANCE_PATTERN.match(data["lastAttendance"])

    async def test_center_required(self, client: AsyncClient, assistant_token: str, student):
        response = await post(
            client, assistant_token, "attend", {"lesson": LESSON, "attended": True}
        )

        assert response.status_code == 422

    async def test_lesson_or_week_required(self, client: AsyncClient, assistant_token: str, student):
        response = await post(
            client, assistant_token, "attend", {"attended": True, "center": "Rehab Center"}
        )

        assert response.status_code == 422

    async def test_not_attended_clears_dependent_fields(
        self, client: AsyncClient, assistant_token: str, student
    ):
        """Un-attending wipes homework, quiz and paid but keeps the comment."""
        await attend(client, assistant_token)
        await post(client, assistant_token, "hw", {"lesson": LESSON, "hwDone": True, "homework_degree": "9/10"})
        await post(client, assistant_token, "quiz_degree", {"lesson": LESSON, "quizDegree": "7/10"})
        await post(client, assistant_token, "paid", {"lesson": LESSON, "paid": True})
        await post(client, assistant_token, "comment", {"lesson": LESSON, "comment": "Sharp"})

        response = await post(
            client, assistant_token, "attend", {"lesson": LESSON, "attended": False}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["attended_the_session"] is False
        assert data["lastAttendance"] is None
        assert data["lastAttendanceCenter"] is None
        assert data["hwDone"] is False
        assert data["homework_degree"] is None
        assert data["quizDegree"] is None
        assert data["quizDisplay"] == "0/0"
        assert data["paid"] is False
        assert data["comment"] == "Sharp"

    async def test_reattending_keeps_first_attendance(
        self, client: AsyncClient, assistant_token: str, student
    ):
        first = (await attend(client, assistant_token)).json()

        second = await post(
            client,
            assistant_token,
            "attend",
            {"lesson": LESSON, "attended": True, "center": "Other Center"},
        )

        assert second.json()["lastAttendance"] == first["lastAttendance"]
        assert second.json()["lastAttendanceCenter"] == "Rehab Center"

    async def test_unknown_lesson(self, client: AsyncClient, assistant_token: str, student):
        response = await attend(client, assistant_token, lesson="Calculus")

        assert response.status_code == 400
        assert "Unknown lesson" in response.json()["detail"]

    async def test_deactivated_student(self, client: AsyncClient, assistant_token: str, db: AsyncSession):
        await make_student(db, account_state=AccountState.DEACTIVATED.value)

        response = await attend(client, assistant_token)

        assert response.status_code == 403

    async def test_student_not_found(self, client: AsyncClient, assistant_token: str):
        response = await attend(client, assistant_token, student_id=404)

        assert response.status_code == 404

    async def test_unauthenticated(self, client: AsyncClient, student):
        response = await client.post(
            "/api/v1/students/1/attend",
            json={"lesson": LESSON, "attended": True, "center": "Rehab Center"},
        )

        assert response.status_code == 401


class TestWeeks:
    """Writes addressed by week number."""

    async def test_legacy_week_list(self, client: AsyncClient, assistant_token: str, db: AsyncSession):
        await make_student(db, lessons=[{"week": 1, "attended": False}, {"week": 2, "attended": False}])

        response = await attend(client, assistant_token, week=2)

        assert response.status_code == 200
        assert response.json()["week"] == 2
        detail = await client.get("/api/v1/students/1", headers=auth_header(assistant_token))
        lessons = detail.json()["lessons"]
        assert isinstance(lessons, list)
        assert lessons[0]["attended"] is False
        assert lessons[1]["attended"] is True

    async def test_missing_week_is_appended(
        self, client: AsyncClient, assistant_token: str, db: AsyncSession
    ):
        await make_student(db, lessons=[{"week": 1, "attended": False}])

        await attend(client, assistant_token, week=4)

        detail = await client.get("/api/v1/students/1", headers=auth_header(assistant_token))
        lessons = detail.json()["lessons"]
        assert [entry["week"] for entry in lessons] == [1, 4]

    async def test_week_on_named_lessons_uses_curriculum(
        self, client: AsyncClient, assistant_token: str, student
    ):
        response = await attend(client, assistant_token, week=3)

        assert response.status_code == 200
        assert response.json()["lesson"] == "Parallel Structure"

    async def test_week_beyond_curriculum(self, client: AsyncClient, assistant_token: str, student):
        response = await attend(client, assistant_token, week=11)

        assert response.status_code == 400


class TestHomework:
    """Tests for homework state and degree."""

    async def test_requires_attendance(self, client: AsyncClient, assistant_token: str, student):
        response = await post(client, assistant_token, "hw", {"lesson": LESSON, "hwDone": True})

        assert response.status_code == 400
        assert response.json()["detail"] == (
            "Student must be marked as attended before homework can be updated"
        )

    async def test_unset_homework_without_attendance(
        self, client: AsyncClient, assistant_token: str, student
    ):
        response = await post(client, assistant_token, "hw", {"lesson": LESSON, "hwDone": False})

        assert response.status_code == 200
        assert response.json()["hwDone"] is False

    async def test_homework_sentinel(self, client: AsyncClient, assistant_token: str, student):
        await attend(client, assistant_token)

        response = await post(
            client, assistant_token, "hw", {"lesson": LESSON, "hwDone": "Not Completed"}
        )

        assert response.json()["hwDone"] == "Not Completed"
        assert response.json()["homework_degree"] is None

    async def test_invalid_homework_state(self, client: AsyncClient, assistant_token: str, student):
        response = await post(client, assistant_token, "hw", {"lesson": LESSON, "hwDone": "maybe"})

        assert response.status_code == 422

    async def test_degree_marks_homework_done(
        self, client: AsyncClient, assistant_token: str, student
    ):
        await attend(client, assistant_token)

        response = await post(
            client, assistant_token, "homework_degree", {"lesson": LESSON, "homework_degree": 8}
        )

        assert response.status_code == 200
        assert response.json()["hwDone"] is True
        assert response.json()["homework_degree"] == 8


class TestQuizDegree:
    """Tests for POST /students/{id}/quiz_degree."""

    async def test_round_trip(self, client: AsyncClient, assistant_token: str, student):
        """A recorded degree reads back exactly as written."""
        await attend(client, assistant_token)

        response = await post(
            client, assistant_token, "quiz_degree", {"lesson": LESSON, "quizDegree": "7/10"}
        )
        assert response.status_code == 200

        detail = await client.get(
            "/api/v1/students/1", params={"lesson": LESSON}, headers=auth_header(assistant_token)
        )
        view = detail.json()["view"]
        assert view["quizDegree"] == "7/10"
        assert view["quizDisplay"] == "7/10"

    async def test_sentinel_stays_distinct(self, client: AsyncClient, assistant_token: str, student):
        await attend(client, assistant_token)

        response = await post(
            client,
            assistant_token,
            "quiz_degree",
            {"lesson": LESSON, "quizDegree": "Didn't Attend The Quiz"},
        )

        assert response.json()["quizDegree"] == "Didn't Attend The Quiz"
        assert response.json()["quizDisplay"] == "Didn't Attend The Quiz"

    async def test_clear_degree(self, client: AsyncClient, assistant_token: str, student):
        await attend(client, assistant_token)
        await post(client, assistant_token, "quiz_degree", {"lesson": LESSON, "quizDegree": "No Quiz"})

        response = await post(
            client, assistant_token, "quiz_degree", {"lesson": LESSON, "quizDegree": None}
        )

        assert response.json()["quizDegree"] is None
        assert response.json()["quizDisplay"] == "0/0"

    async def test_degree_above_maximum(self, client: AsyncClient, assistant_token: str, student):
        await attend(client, assistant_token)

        response = await post(
            client, assistant_token, "quiz_degree", {"lesson": LESSON, "quizDegree": "11/10"}
        )

        assert response.status_code == 422

    async def test_requires_attendance(self, client: AsyncClient, assistant_token: str, student):
        response = await post(
            client, assistant_token, "quiz_degree", {"lesson": LESSON, "quizDegree": "7/10"}
        )

        assert response.status_code == 400
        assert "attended" in response.json()["detail"]


class TestCommentsAndMessages:
    """Tests for comments, message flags and the paid flag."""

    async def test_comment_without_attendance(self, client: AsyncClient, assistant_token: str, student):
        response = await post(client, assistant_token, "comment", {"lesson": LESSON, "comment": "Absent, call parent"})

        assert response.status_code == 200
        assert response.json()["comment"] == "Absent, call parent"

    async def test_blank_comment_clears(self, client: AsyncClient, assistant_token: str, student):
        await post(client, assistant_token, "comment", {"lesson": LESSON, "comment": "note"})

        response = await post(client, assistant_token, "comment", {"lesson": LESSON, "comment": "   "})

        assert response.json()["comment"] is None

    async def test_student_message_flag(self, client: AsyncClient, assistant_token: str, student):
        response = await post(
            client,
            assistant_token,
            "update-message-state",
            {"lesson": LESSON, "message_state": True, "isStudentMessage": True},
        )

        assert response.json()["student_message_state"] is True
        assert response.json()["parent_message_state"] is False

    async def test_parent_message_flag_by_default(
        self, client: AsyncClient, assistant_token: str, student
    ):
        response = await post(
            client, assistant_token, "update-message-state", {"lesson": LESSON, "message_state": True}
        )

        assert response.json()["student_message_state"] is False
        assert response.json()["parent_message_state"] is True

    async def test_paid_requires_attendance(self, client: AsyncClient, assistant_token: str, student):
        response = await post(client, assistant_token, "paid", {"lesson": LESSON, "paid": True})

        assert response.status_code == 400

    async def test_paid(self, client: AsyncClient, assistant_token: str, student):
        await attend(client, assistant_token)

        response = await post(client, assistant_token, "paid", {"lesson": LESSON, "paid": True})

        assert response.status_code == 200
        assert response.json()["paid"] is True


class TestRejectedWrites:
    """A rejected write leaves no trace."""

    async def test_nothing_persisted(
        self, client: AsyncClient, assistant_token: str, student, db: AsyncSession
    ):
        await post(client, assistant_token, "quiz_degree", {"lesson": LESSON, "quizDegree": "7/10"})

        detail = await client.get("/api/v1/students/1", headers=auth_header(assistant_token))
        assert detail.json()["lessons"] == {}
        count = await db.execute(select(func.count()).select_from(HistoryRecord))
        assert count.scalar() == 0
