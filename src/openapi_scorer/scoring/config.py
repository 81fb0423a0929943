"""Criterion registry and the scoring lookup tables."""

import math

from pydantic import BaseModel, ConfigDict

SCHEMA_AND_TYPES = "Schema & Types"
DESCRIPTIONS = "Descriptions & Documentation"
PATHS_AND_OPERATIONS = "Paths & Operations"
RESPONSE_CODES = "Response Codes"
EXAMPLES = "Examples & Samples"
SECURITY = "Security"
BEST_PRACTICES = "Miscellaneous Best Practices"


class Criterion(BaseModel):
    """A weighted scoring dimension."""

    model_config = ConfigDict(frozen=True)

    name: str
    weight: float
    max_score: int


CRITERIA: tuple[Criterion, ...] = (
    Criterion(name=SCHEMA_AND_TYPES, weight=0.2, max_score=20),
    Criterion(name=DESCRIPTIONS, weight=0.2, max_score=20),
    Criterion(name=PATHS_AND_OPERATIONS, weight=0.15, max_score=15),
    Criterion(name=RESPONSE_CODES, weight=0.15, max_score=15),
    Criterion(name=EXAMPLES, weight=0.1, max_score=10),
    Criterion(name=SECURITY, weight=0.1, max_score=10),
    Criterion(name=BEST_PRACTICES, weight=0.1, max_score=10),
)

# Points taken off a criterion's max score per issue.
SEVERITY_DEDUCTIONS: dict[str, int] = {
    "critical": 4,
    "high": 3,
    "medium": 2,
    "low": 1,
}

# Checked top-down; anything below the last threshold is an F.
GRADE_THRESHOLDS: tuple[tuple[int, str], ...] = (
    (90, "A"),
    (80, "B"),
    (70, "C"),
    (60, "D"),
)
FAILING_GRADE = "F"

GRADE_DESCRIPTIONS: dict[str, str] = {
    "A": "Excellent",
    "B": "Good",
    "C": "Average",
    "D": "Below Average",
    "F": "Poor",
}


def get_criterion(name: str) -> Criterion:
    """Look up a registered criterion. Raises KeyError for unknown names."""
    for criterion in CRITERIA:
        if criterion.name == name:
            return criterion
    raise KeyError(f"Unknown criterion: {name}")


def calculate_grade(score: float) -> str:
    for threshold, grade in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return FAILING_GRADE


def grade_description(grade: str) -> str:
    return GRADE_DESCRIPTIONS.get(grade, "Unknown")


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (round() rounds to even)."""
    return math.floor(value + 0.5)
