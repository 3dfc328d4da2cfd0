"""Pydantic schemas."""

from tracker.schemas.auth import LoginRequest, Token
from tracker.schemas.lesson import EffectiveView
from tracker.schemas.student import (
    StudentCreate,
    StudentDetail,
    StudentListResponse,
    StudentResponse,
    StudentUpdate,
)

__all__ = [
    # Auth
    "Token",
    "LoginRequest",
    # Lessons
    "EffectiveView",
    # Student
    "StudentCreate",
    "StudentUpdate",
    "StudentResponse",
    "StudentDetail",
    "StudentListResponse",
]
