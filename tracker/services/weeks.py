"""Repair of legacy week-record lists.

Old student documents store lessons as a list of week records, and some of
them contain ``None`` holes or records without a ``week`` number. ``normalize``
fills those in without touching any record that already has a number.
Duplicate numbers among existing records are kept as they are; use
``duplicate_weeks`` to report them.
"""

from collections import Counter
from typing import Any

SEARCH_LIMIT = 200


def default_week(number: int) -> dict[str, Any]:
    return {
        "week": number,
        "attended": False,
        "lastAttendance": None,
        "lastAttendanceCenter": None,
        "hwDone": False,
        "quizDegree": None,
        "comment": None,
        "message_state": False,
    }


def _has_week_number(entry: Any) -> bool:
    # bool is an int subclass but never a week number
    return (
        isinstance(entry, dict)
        and isinstance(entry.get("week"), int)
        and not isinstance(entry.get("week"), bool)
    )


def next_available_number(
    preferred: int,
    existing: set[int],
    assigned: set[int],
    limit: int = SEARCH_LIMIT,
) -> int:
    """Pick ``preferred`` if free, else the smallest free positive number.

    Falls back to ``preferred`` when 1..limit are all taken.
    """
    if preferred not in existing and preferred not in assigned:
        return preferred
    for candidate in range(1, limit + 1):
        if candidate not in existing and candidate not in assigned:
            return candidate
    return preferred


def normalize(weeks: list[Any]) -> list[Any]:
    """Return a copy of ``weeks`` where every slot carries a week number."""
    existing = {entry["week"] for entry in weeks if _has_week_number(entry)}
    assigned: set[int] = set()
    result: list[Any] = []

    for position, entry in enumerate(weeks, start=1):
        if not isinstance(entry, dict):
            number = next_available_number(position, existing, assigned)
            assigned.add(number)
            result.append(default_week(number))
        elif entry.get("week") is None:
            number = next_available_number(position, existing, assigned)
            assigned.add(number)
            result.append({**entry, "week": number})
        else:
            if _has_week_number(entry):
                assigned.add(entry["week"])
            result.append(entry)

    return result


def count_repairs(weeks: list[Any]) -> int:
    """Number of entries ``normalize`` would change."""
    return sum(
        1 for entry in weeks if not isinstance(entry, dict) or entry.get("week") is None
    )


def duplicate_weeks(weeks: list[Any]) -> list[int]:
    """Week numbers used by more than one record, in ascending order."""
    counts = Counter(entry["week"] for entry in weeks if _has_week_number(entry))
    return sorted(number for number, count in counts.items() if count > 1)
