"""Uniform access to a student's per-lesson records.

A student's ``lessons`` value comes in two shapes:

* ``ByName``: a mapping of lesson name to record (what new students get).
* ``ByIndex``: the legacy list of week records, identified by their ``week``
  field rather than by position.

Both shapes expose the same small interface so lookups and writes are written
once. A book always works on its own deep copy of the stored value; call
``dump()`` to get the value to persist.
"""

import copy
from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import Any

from tracker.services.weeks import next_available_number

# A lesson name, a legacy week number, or None for "current"
LessonSelector = str | int | None

Slot = str | int


def default_record(lesson: str | None = None, week: int | None = None) -> dict[str, Any]:
    """Record for a lesson with no activity yet."""
    record: dict[str, Any] = {
        "attended": False,
        "lastAttendance": None,
        "lastAttendanceCenter": None,
        "hwDone": False,
        "homework_degree": None,
        "quizDegree": None,
        "comment": None,
        "student_message_state": False,
        "parent_message_state": False,
        "paid": False,
    }
    if lesson is not None:
        record["lesson"] = lesson
    if week is not None:
        record["week"] = week
    return record


class LessonBook(ABC):
    """Common interface over both storage shapes."""

    @abstractmethod
    def items(self) -> Iterator[tuple[str | None, dict[str, Any]]]:
        """Yield ``(lesson label, record)`` for well-formed records in stored order."""
        ...

    @abstractmethod
    def locate(self, selector: str | int) -> Slot | None:
        """Find the slot holding the record for ``selector``."""
        ...

    @abstractmethod
    def get(self, slot: Slot) -> dict[str, Any]:
        ...

    @abstractmethod
    def set(self, slot: Slot, record: dict[str, Any]) -> None:
        ...

    @abstractmethod
    def add(self, selector: str | int) -> Slot:
        """Create a default record for ``selector`` and return its slot."""
        ...

    @abstractmethod
    def dump(self) -> Any:
        ...

    def records(self) -> list[dict[str, Any]]:
        return [record for _, record in self.items()]

    def find(self, selector: str | int) -> tuple[str | None, dict[str, Any]] | None:
        """Return ``(label, record)`` for ``selector`` or None."""
        slot = self.locate(selector)
        if slot is None:
            return None
        record = self.get(slot)
        label = slot if isinstance(slot, str) else record.get("lesson")
        return label, record


class ByName(LessonBook):
    """Lessons stored as ``{lesson name: record}``."""

    def __init__(self, data: dict[str, Any]):
        self.data = data

    def items(self) -> Iterator[tuple[str | None, dict[str, Any]]]:
        for name, record in self.data.items():
            if isinstance(record, dict):
                yield name, record

    def locate(self, selector: str | int) -> Slot | None:
        if isinstance(selector, str):
            return selector if isinstance(self.data.get(selector), dict) else None
        for name, record in self.items():
            if record.get("week") == selector:
                return name
        return None

    def get(self, slot: Slot) -> dict[str, Any]:
        return self.data[slot]

    def set(self, slot: Slot, record: dict[str, Any]) -> None:
        self.data[slot] = record

    def add(self, selector: str | int) -> Slot:
        if not isinstance(selector, str):
            raise TypeError("Lessons stored by name need a lesson name, not a week number")
        self.data[selector] = default_record(lesson=selector)
        return selector

    def dump(self) -> dict[str, Any]:
        return self.data


class ByIndex(LessonBook):
    """Legacy lessons stored as a list of week records."""

    def __init__(self, data: list[Any]):
        self.data = data

    def items(self) -> Iterator[tuple[str | None, dict[str, Any]]]:
        for record in self.data:
            if isinstance(record, dict):
                yield record.get("lesson"), record

    def locate(self, selector: str | int) -> Slot | None:
        field = "lesson" if isinstance(selector, str) else "week"
        for index, record in enumerate(self.data):
            if isinstance(record, dict) and record.get(field) == selector:
                return index
        return None

    def get(self, slot: Slot) -> dict[str, Any]:
        return self.data[slot]

    def set(self, slot: Slot, record: dict[str, Any]) -> None:
        self.data[slot] = record

    def add(self, selector: str | int) -> Slot:
        if isinstance(selector, str):
            used = {
                record["week"]
                for record in self.data
                if isinstance(record, dict) and isinstance(record.get("week"), int)
            }
            week = next_available_number(len(self.data) + 1, used, set())
            record = default_record(lesson=selector, week=week)
        else:
            record = default_record(week=selector)
        self.data.append(record)
        return len(self.data) - 1

    def dump(self) -> list[Any]:
        return self.data


def open_book(lessons: Any) -> LessonBook:
    """Wrap a stored ``lessons`` value; None and other junk read as an empty mapping."""
    if isinstance(lessons, list):
        return ByIndex(copy.deepcopy(lessons))
    if isinstance(lessons, dict):
        return ByName(copy.deepcopy(lessons))
    return ByName({})
