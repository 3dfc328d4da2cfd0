# Database models

from tracker.models.assistant import Assistant
from tracker.models.history import HistoryRecord
from tracker.models.student import Student

__all__ = [
    "Assistant",
    "HistoryRecord",
    "Student",
]
