"""Shared plumbing for report generators."""

import logging
import re
from datetime import datetime
from pathlib import Path

from openapi_scorer.config import settings
from openapi_scorer.scoring.config import round_half_up
from openapi_scorer.scoring.models import SEVERITY_ORDER, Issue, ScoringResult

logger = logging.getLogger(__name__)

SEVERITY_EMOJI = {"critical": "🔴", "high": "🟠", "medium": "🟡", "low": "🟢"}


class BaseReportGenerator:
    """Renders a ScoringResult into one output format."""

    type_name = "Base"

    def __init__(self, file_extension: str, mime_type: str):
        self.file_extension = file_extension
        self.mime_type = mime_type

    def generate(self, result: ScoringResult, api_title: str | None = None) -> str:
        raise NotImplementedError

    def export(self, result: ScoringResult, file_path: Path, api_title: str | None = None) -> Path:
        """Render and write the report, creating parent directories as needed.

        An existing file is never overwritten: the name gets a ``-1``, ``-2``
        ... suffix instead, and the path actually written is returned.
        """
        content = self.generate(result, api_title)
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        candidate, attempt = file_path, 0
        while True:
            try:
                with candidate.open("x", encoding="utf-8") as f:
                    f.write(content)
                break
            except FileExistsError:
                attempt += 1
                candidate = file_path.with_name(f"{file_path.stem}-{attempt}{file_path.suffix}")
        logger.info("%s report exported to: %s", self.type_name, candidate)
        return candidate

    def generate_file_name(self, api_title: str | None = None, timestamp: datetime | None = None) -> str:
        clean_title = sanitize_file_name(api_title or "openapi-report") or "openapi-report"
        time_str = (timestamp or datetime.now()).strftime("%Y-%m-%dT%H-%M-%S")
        return f"{clean_title}-{time_str}.{self.file_extension}"

    @staticmethod
    def metadata(api_title: str | None = None) -> dict:
        return {
            "timestamp": datetime.now().isoformat(timespec="seconds"),
            "apiTitle": api_title or "Unknown API",
            "generator": settings.app_name,
            "version": settings.version,
        }


def sanitize_file_name(name: str) -> str:
    name = re.sub(r"[^a-zA-Z0-9]", "-", name)
    name = re.sub(r"-+", "-", name)
    return name.strip("-").lower()


def calculate_percentage(score: float, max_score: float) -> int:
    if not max_score:
        return 0
    return round_half_up(score / max_score * 100)


def group_issues_by_severity(issues) -> dict[str, list[Issue]]:
    """Group issues by severity, most severe first, omitting empty groups."""
    groups: dict[str, list[Issue]] = {severity: [] for severity in SEVERITY_ORDER}
    for issue in issues:
        groups[issue.severity].append(issue)
    return {severity: items for severity, items in groups.items() if items}


def score_emoji(percentage: float) -> str:
    if percentage >= 90:
        return "🟢"
    if percentage >= 70:
        return "🟡"
    if percentage >= 50:
        return "🟠"
    return "🔴"


def severity_emoji(severity: str) -> str:
    return SEVERITY_EMOJI.get(severity, "⚪")


def escape_markdown(text: str) -> str:
    return re.sub(r"([\\`*_{}\[\]()#+\-.!|])", r"\\\1", text)


def issue_location(issue: Issue, separator: str = " > ") -> str:
    parts = [issue.path]
    if issue.operation:
        parts.append(issue.operation)
    if issue.location:
        parts.append(issue.location)
    return separator.join(parts)


def worst_criterion(result: ScoringResult):
    return min(result.criterion_results, key=lambda c: calculate_percentage(c.score, c.max_score))


def best_criterion(result: ScoringResult):
    return max(result.criterion_results, key=lambda c: calculate_percentage(c.score, c.max_score))


def recommendations(result: ScoringResult) -> list[str]:
    """Plain-language next steps derived from the score and issue counts."""
    notes = []
    if result.overall_score < 60:
        notes.append("Critical: Overall score is below 60. Immediate action required to improve API quality.")
    elif result.overall_score < 80:
        notes.append("Warning: Overall score could be improved. Focus on addressing high and critical issues.")

    if result.summary.critical_issues:
        notes.append(f"Address {result.summary.critical_issues} critical issue(s) immediately.")
    if result.summary.high_issues:
        notes.append(f"Resolve {result.summary.high_issues} high-priority issue(s) soon.")

    for criterion in result.criterion_results:
        percentage = calculate_percentage(criterion.score, criterion.max_score)
        if percentage < 50:
            notes.append(f'Focus on improving "{criterion.criterion}" - currently at {percentage}%.')

    if result.summary.medium_issues + result.summary.low_issues > 10:
        notes.append("Consider establishing API documentation standards to prevent future issues.")
    return notes
