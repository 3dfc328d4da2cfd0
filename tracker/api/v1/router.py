"""API v1 router aggregating all route modules."""

from fastapi import APIRouter

from tracker.api.v1.routes import (
    assistants,
    auth,
    history,
    lessons,
    mock_exams,
    payments,
    students,
)

api_router = APIRouter()

api_router.include_router(auth.router)
api_router.include_router(assistants.router)
api_router.include_router(students.router)
api_router.include_router(lessons.router)
api_router.include_router(payments.router)
api_router.include_router(mock_exams.router)
api_router.include_router(history.router)
