"""The analyzer contract plus the issue and scoring helpers every analyzer uses."""

from typing import Protocol

from openapi_scorer.scoring.config import SEVERITY_DEDUCTIONS, get_criterion
from openapi_scorer.scoring.models import CriterionResult, Issue, Severity


class Analyzer(Protocol):
    """Evaluates one criterion against a document."""

    criterion: str

    def analyze(self, document: dict) -> CriterionResult: ...


def create_issue(
    path: str,
    operation: str | None,
    location: str,
    description: str,
    severity: Severity,
    suggestion: str,
    criterion: str,
) -> Issue:
    return Issue(
        path=path,
        operation=operation,
        location=location,
        description=description,
        severity=severity,
        suggestion=suggestion,
        criterion=criterion,
    )


def calculate_score(issues: list[Issue], checkable_items: int, max_score: int) -> int:
    """Deduct per-issue severity points from ``max_score``, clamped at zero.

    ``checkable_items`` does not take part in the arithmetic: the score depends
    only on how many issues were found and how severe they are.
    """
    deductions = sum(SEVERITY_DEDUCTIONS.get(issue.severity, 0) for issue in issues)
    return min(max(0, max_score - deductions), max_score)


def build_result(criterion_name: str, issues: list[Issue], checkable_items: int) -> CriterionResult:
    """Score ``issues`` against the registered criterion and wrap the outcome."""
    criterion = get_criterion(criterion_name)
    score = calculate_score(issues, checkable_items, criterion.max_score)
    return CriterionResult(
        criterion=criterion.name,
        score=score,
        max_score=criterion.max_score,
        weight=criterion.weight,
        weighted_score=score / criterion.max_score * criterion.weight * 100,
        issues=tuple(issues),
    )


class IssueCollector:
    """Accumulates issues for one criterion during a single analyze() call."""

    def __init__(self, criterion: str):
        self.criterion = criterion
        self.issues: list[Issue] = []

    def add(
        self,
        path: str,
        operation: str | None,
        location: str,
        description: str,
        severity: Severity,
        suggestion: str,
    ) -> None:
        self.issues.append(
            create_issue(path, operation, location, description, severity, suggestion, self.criterion)
        )

    def result(self, checkable_items: int) -> CriterionResult:
        return build_result(self.criterion, self.issues, checkable_items)
