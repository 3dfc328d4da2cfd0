"""Mock exam routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.api.v1.routes.students import get_student_or_404
from tracker.core.database import get_db
from tracker.core.deps import CurrentUser
from tracker.schemas.mock_exam import MockExamCreate, MockExamResponse, MockExamResult
from tracker.services import mock_exam as mock_exam_service

router = APIRouter(prefix="/mock-exams", tags=["Mock Exams"])


@router.post("", response_model=MockExamResponse)
async def save_mock_exam(
    exam_data: MockExamCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser,
) -> MockExamResponse:
    """Record one of the student's ten mock exam results."""
    student = await get_student_or_404(db, exam_data.student_id)

    if not student.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Student account is deactivated",
        )

    exam = await mock_exam_service.save_mock_exam(db, student, exam_data)
    return MockExamResponse(
        student_id=student.id,
        exam_index=exam_data.exam_index,
        exam=MockExamResult.model_validate(exam),
    )
