"""Result records shared by the analyzers, the engine and the reporters.

Every record is immutable once built. Field names are snake_case in Python
and serialise to camelCase (``maxScore``, ``weightedScore`` ...) with
``model_dump(by_alias=True)``, which is what reports and the HTTP API emit.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from openapi_scorer.scoring.config import round_half_up

Severity = Literal["low", "medium", "high", "critical"]

SEVERITY_ORDER: tuple[str, ...] = ("critical", "high", "medium", "low")


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class Issue(_Record):
    """A single diagnostic finding."""

    path: str  # /pets, components/schemas, info ...
    operation: str | None = None  # lowercase HTTP method when tied to an operation
    location: str
    description: str
    severity: Severity
    suggestion: str
    criterion: str


class CriterionResult(_Record):
    """Outcome of one analyzer run."""

    criterion: str
    score: int
    max_score: int
    weight: float
    weighted_score: float
    issues: tuple[Issue, ...] = ()

    @property
    def percentage(self) -> int:
        if not self.max_score:
            return 0
        return round_half_up(self.score / self.max_score * 100)


class SeveritySummary(_Record):
    critical_issues: int = 0
    high_issues: int = 0
    medium_issues: int = 0
    low_issues: int = 0


class ScoringResult(_Record):
    """Overall score for one document."""

    overall_score: int
    grade: str
    criterion_results: tuple[CriterionResult, ...]
    total_issues: int
    summary: SeveritySummary

    @property
    def issues(self) -> list[Issue]:
        return [issue for result in self.criterion_results for issue in result.issues]
