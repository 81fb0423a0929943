"""Runs every analyzer against a document and aggregates the overall score."""

import logging
from dataclasses import dataclass

from openapi_scorer.analyzers.base import Analyzer, create_issue
from openapi_scorer.analyzers.conventions import BestPracticesAnalyzer
from openapi_scorer.analyzers.descriptions import DescriptionsAnalyzer
from openapi_scorer.analyzers.examples import ExamplesAnalyzer
from openapi_scorer.analyzers.paths import PathsAndOperationsAnalyzer
from openapi_scorer.analyzers.responses import ResponseCodesAnalyzer
from openapi_scorer.analyzers.schema import SchemaAndTypesAnalyzer
from openapi_scorer.analyzers.security import SecurityAnalyzer
from openapi_scorer.scoring.config import CRITERIA, Criterion, calculate_grade, round_half_up
from openapi_scorer.scoring.models import CriterionResult, ScoringResult, SeveritySummary

logger = logging.getLogger(__name__)


def default_analyzers() -> list[Analyzer]:
    return [
        SchemaAndTypesAnalyzer(),
        DescriptionsAnalyzer(),
        PathsAndOperationsAnalyzer(),
        ResponseCodesAnalyzer(),
        ExamplesAnalyzer(),
        SecurityAnalyzer(),
        BestPracticesAnalyzer(),
    ]


@dataclass(frozen=True)
class AnalyzerSuccess:
    result: CriterionResult


@dataclass(frozen=True)
class AnalyzerFailure:
    criterion: Criterion
    error: Exception

    def to_result(self) -> CriterionResult:
        issue = create_issue(
            "N/A",
            None,
            "Analyzer",
            f"Failed to analyze: {self.error}",
            "critical",
            "Fix the analyzer implementation or the OpenAPI specification",
            self.criterion.name,
        )
        return CriterionResult(
            criterion=self.criterion.name,
            score=0,
            max_score=self.criterion.max_score,
            weight=self.criterion.weight,
            weighted_score=0.0,
            issues=(issue,),
        )


AnalyzerOutcome = AnalyzerSuccess | AnalyzerFailure


class ScoringEngine:
    """Scores documents against the registered criteria."""

    def __init__(self, analyzers: list[Analyzer] | None = None):
        self.analyzers: dict[str, Analyzer] = {
            analyzer.criterion: analyzer for analyzer in (analyzers or default_analyzers())
        }
        for criterion in CRITERIA:
            if criterion.name not in self.analyzers:
                raise KeyError(f"No analyzer found for criterion: {criterion.name}")

    def available_criteria(self) -> list[str]:
        return [criterion.name for criterion in CRITERIA]

    def has_analyzer(self, criterion_name: str) -> bool:
        return criterion_name in self.analyzers

    def run_analyzer(self, criterion: Criterion, document: dict) -> AnalyzerOutcome:
        """Run one analyzer, capturing any exception as a failure outcome."""
        logger.debug("Analyzing: %s", criterion.name)
        try:
            result = self.analyzers[criterion.name].analyze(document)
            weighted = result.score / result.max_score * criterion.weight * 100
            result = result.model_copy(update={"weight": criterion.weight, "weighted_score": weighted})
        except Exception as e:
            logger.exception("Error analyzing %s", criterion.name)
            return AnalyzerFailure(criterion=criterion, error=e)
        logger.info("%s: %s/%s (%d issues)", criterion.name, result.score, result.max_score, len(result.issues))
        return AnalyzerSuccess(result=result)

    def score(self, document: dict) -> ScoringResult:
        logger.info("Starting OpenAPI specification analysis")
        results: list[CriterionResult] = []

        for criterion in CRITERIA:
            outcome = self.run_analyzer(criterion, document)
            if isinstance(outcome, AnalyzerFailure):
                results.append(outcome.to_result())
                continue
            results.append(outcome.result)

        issues = [issue for result in results for issue in result.issues]
        overall = round_half_up(sum(result.weighted_score for result in results))
        summary = SeveritySummary(
            critical_issues=sum(1 for issue in issues if issue.severity == "critical"),
            high_issues=sum(1 for issue in issues if issue.severity == "high"),
            medium_issues=sum(1 for issue in issues if issue.severity == "medium"),
            low_issues=sum(1 for issue in issues if issue.severity == "low"),
        )
        scoring_result = ScoringResult(
            overall_score=overall,
            grade=calculate_grade(overall),
            criterion_results=tuple(results),
            total_issues=len(issues),
            summary=summary,
        )
        logger.info("Analysis complete. Overall score: %d/100 (Grade: %s)", overall, scoring_result.grade)
        return scoring_result
