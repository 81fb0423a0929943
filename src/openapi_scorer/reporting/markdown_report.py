"""Markdown report, readable on GitHub or in a terminal pager."""

from datetime import datetime

from openapi_scorer.config import settings
from openapi_scorer.reporting.base import (
    BaseReportGenerator,
    calculate_percentage,
    escape_markdown,
    group_issues_by_severity,
    score_emoji,
    severity_emoji,
    worst_criterion,
)
from openapi_scorer.scoring.config import grade_description, round_half_up
from openapi_scorer.scoring.models import CriterionResult, Issue, ScoringResult

GRADE_EMOJI = {"A": "🏆", "B": "👍", "C": "👌", "D": "👎", "F": "💥"}

GENERAL_TIPS = [
    "**Complete Descriptions:** Ensure every endpoint, parameter, and response has meaningful descriptions",
    "**Proper Examples:** Include request/response examples for all major operations",
    "**Consistent Naming:** Use clear, consistent naming conventions for paths and operations",
    "**Error Handling:** Define appropriate HTTP status codes for all scenarios",
    "**Security:** Implement and document proper authentication/authorization",
    "**Versioning:** Use semantic versioning and document API changes",
]


def status_text(percentage: int) -> str:
    if percentage >= 90:
        return "🟢 Excellent"
    if percentage >= 80:
        return "🟡 Good"
    if percentage >= 60:
        return "🟠 Fair"
    return "🔴 Needs Improvement"


class MarkdownReportGenerator(BaseReportGenerator):
    type_name = "Markdown"

    def __init__(self):
        super().__init__("md", "text/markdown")

    def generate(self, result: ScoringResult, api_title: str | None = None) -> str:
        sections = [
            self._header(api_title or "Unknown API"),
            self._overall_score(result),
            self._summary(result),
            self._detailed_results(result),
            self._recommendations(result),
        ]
        return "\n".join(sections)

    def generate_simple(self, result: ScoringResult, api_title: str | None = None) -> str:
        """A short report: score, grade and one line per criterion."""
        lines = [
            f"# OpenAPI Score Report: {api_title or 'Unknown API'}",
            "",
            f"**Score:** {result.overall_score}/100 | **Grade:** {result.grade}  ",
            f"**Issues:** {result.total_issues} total "
            f"({result.summary.critical_issues} critical, {result.summary.high_issues} high)",
            "",
            "| Criterion | Score | Issues |",
            "|-----------|-------|--------|",
        ]
        for criterion in result.criterion_results:
            percentage = calculate_percentage(criterion.score, criterion.max_score)
            lines.append(
                f"| {score_emoji(percentage)} {criterion.criterion} "
                f"| {criterion.score}/{criterion.max_score} ({percentage}%) | {len(criterion.issues)} |"
            )
        lines += ["", f"*Generated by {settings.app_name}*", ""]
        return "\n".join(lines)

    def _header(self, title: str) -> str:
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        return (
            f"# 🔍 OpenAPI Score Report: {escape_markdown(title)}\n\n"
            f"**Generated:** {timestamp}  \n"
            f"**Scorer:** {settings.app_name} v{settings.version}\n\n"
            "---\n"
        )

    def _overall_score(self, result: ScoringResult) -> str:
        emoji = GRADE_EMOJI.get(result.grade, "❓")
        return (
            "## 📊 Overall Score\n\n"
            f"### {emoji} {result.overall_score}/100 | Grade: {result.grade}\n"
            f"**{grade_description(result.grade)}**\n"
        )

    def _summary(self, result: ScoringResult) -> str:
        summary = result.summary
        if result.total_issues == 0:
            total_status = "✅ Perfect"
        elif result.total_issues < 5:
            total_status = "🟡 Good"
        else:
            total_status = "🔴 Needs Attention"
        critical_status = "✅ None" if summary.critical_issues == 0 else "🚨 Action Required"
        rows = [
            ("Total Issues", result.total_issues, total_status),
            ("Critical Issues", summary.critical_issues, critical_status),
            ("High Issues", summary.high_issues, "✅" if summary.high_issues == 0 else "🟠"),
            ("Medium Issues", summary.medium_issues, "✅" if summary.medium_issues == 0 else "🟡"),
            ("Low Issues", summary.low_issues, "✅" if summary.low_issues == 0 else "🟢"),
        ]
        lines = ["## 📋 Executive Summary", "", "| Metric | Count | Status |", "|--------|-------|--------|"]
        lines += [f"| **{label}** | {count} | {status} |" for label, count, status in rows]
        return "\n".join(lines) + "\n"

    def _detailed_results(self, result: ScoringResult) -> str:
        lines = [
            "## 📈 Detailed Analysis",
            "",
            "### Scoring Breakdown",
            "",
            "| Criterion | Score | Percentage | Weight | Weighted Score | Issues |",
            "|-----------|-------|------------|--------|----------------|--------|",
        ]
        for criterion in result.criterion_results:
            percentage = calculate_percentage(criterion.score, criterion.max_score)
            lines.append(
                f"| {score_emoji(percentage)} **{criterion.criterion}** "
                f"| {criterion.score}/{criterion.max_score} | {percentage}% "
                f"| {round_half_up(criterion.weight * 100)}% | {criterion.weighted_score:.1f} "
                f"| {len(criterion.issues)} |"
            )
        lines.append("")
        lines += [self._criterion_section(criterion) for criterion in result.criterion_results]
        return "\n".join(lines)

    def _criterion_section(self, criterion: CriterionResult) -> str:
        percentage = calculate_percentage(criterion.score, criterion.max_score)
        lines = [
            f"### {score_emoji(percentage)} {criterion.criterion}",
            "",
            f"**Score:** {criterion.score}/{criterion.max_score} ({percentage}%) | "
            f"**Status:** {status_text(percentage)}  ",
            f"**Weight:** {round_half_up(criterion.weight * 100)}% | "
            f"**Weighted Score:** {criterion.weighted_score:.1f}",
            "",
        ]
        if criterion.issues:
            lines += [f"#### 🔍 Issues Found ({len(criterion.issues)})", ""]
            for severity, issues in group_issues_by_severity(criterion.issues).items():
                lines.append(self._issue_group(severity, issues))
        else:
            lines += ["#### ✅ Perfect Score!", "", "No issues found in this category.", ""]
        lines += ["---", ""]
        return "\n".join(lines)

    @staticmethod
    def _issue_group(severity: str, issues: list[Issue]) -> str:
        lines = [f"##### {severity_emoji(severity)} {severity.capitalize()} Issues ({len(issues)})", ""]
        for index, issue in enumerate(issues, 1):
            location = f"`{issue.path}`"
            if issue.operation:
                location += f" → `{issue.operation}`"
            location += f" → `{issue.location}`"
            lines += [
                f"**{index}.** {escape_markdown(issue.description)}",
                "",
                f"- **📍 Location:** {location}",
                f"- **💡 Suggestion:** {escape_markdown(issue.suggestion)}",
                "",
            ]
        return "\n".join(lines)

    def _recommendations(self, result: ScoringResult) -> str:
        lines = ["## 🎯 Recommendations", ""]
        if result.summary.critical_issues:
            lines += [
                "### 🚨 Critical Action Required",
                "",
                f"You have **{result.summary.critical_issues} critical issue(s)** that must be addressed immediately.",
                "",
            ]
        if result.overall_score < 60:
            lines += [
                "### ⚠️ Quality Alert",
                "",
                f"Your overall score of **{result.overall_score}/100** is below the acceptable threshold. "
                "Address all critical and high-priority issues first.",
                "",
            ]
        elif result.overall_score < 80:
            lines += [
                "### 📈 Improvement Opportunities",
                "",
                f"Your score of **{result.overall_score}/100** is good but has room for improvement.",
                "",
            ]

        if result.criterion_results:
            worst = worst_criterion(result)
            percentage = calculate_percentage(worst.score, worst.max_score)
            if percentage < 70:
                lines += [
                    f"### 🔧 Focus Area: {worst.criterion}",
                    "",
                    f"This category scored **{worst.score}/{worst.max_score}** ({percentage}%) and needs attention.",
                    "",
                ]

        lines += ["### 💡 General Tips for Better API Documentation", ""]
        lines += [f"{index}. {tip}" for index, tip in enumerate(GENERAL_TIPS, 1)]
        lines.append("")
        return "\n".join(lines)
