"""Custom validators and types."""

import re
from typing import Annotated, Literal

from pydantic import AfterValidator, Field

QUIZ_ABSENT = "Didn't Attend The Quiz"
QUIZ_NONE = "No Quiz"
QUIZ_SENTINELS = (QUIZ_ABSENT, QUIZ_NONE)

# "7/10", "7 / 10", "8.5/10"
QUIZ_DEGREE_PATTERN = re.compile(r"^(\d+(?:\.\d+)?)\s*/\s*(\d+(?:\.\d+)?)$")

# Egyptian mobile numbers: 01 + 9 digits
PHONE_PATTERN = re.compile(r"^01[0-9]{9}$")


def validate_quiz_degree(value: str) -> str:
    """
    Validate a recorded quiz degree.

    Accepts one of the sentinels ("Didn't Attend The Quiz", "No Quiz") or an
    "x/y" degree where 0 <= x <= y and y > 0. The value is returned stripped
    but otherwise as written.
    """
    value = value.strip()
    if value in QUIZ_SENTINELS:
        return value

    match = QUIZ_DEGREE_PATTERN.match(value)
    if not match:
        raise ValueError(
            "Quiz degree must look like 'x/y', or be \"Didn't Attend The Quiz\" or \"No Quiz\""
        )

    degree, out_of = float(match.group(1)), float(match.group(2))
    if out_of <= 0:
        raise ValueError("Quiz 'out of' must be greater than 0")
    if degree > out_of:
        raise ValueError("Quiz degree cannot exceed 'out of'")
    return value


def validate_phone_number(value: str) -> str:
    """
    Validate and normalize a mobile phone number.

    Accepts formats:
    - 01012345678
    - 010 1234 5678
    - 010-1234-5678

    Returns normalized format: 01012345678
    """
    normalized = re.sub(r"[\s\-\(\)]", "", value)

    if not PHONE_PATTERN.match(normalized):
        raise ValueError("Invalid phone number. Use format: 01XXXXXXXXX (e.g., 01012345678)")

    return normalized


QuizDegree = Annotated[str, Field(max_length=50), AfterValidator(validate_quiz_degree)]

PhoneNumber = Annotated[
    str,
    Field(min_length=11, max_length=20),
    AfterValidator(validate_phone_number),
]

HomeworkState = bool | Literal["No Homework", "Not Completed"]

HomeworkDegree = str | int | float
