"""Machine-readable JSON report."""

import json

from openapi_scorer.reporting.base import (
    BaseReportGenerator,
    best_criterion,
    calculate_percentage,
    recommendations,
    worst_criterion,
)
from openapi_scorer.scoring.config import grade_description, round_half_up
from openapi_scorer.scoring.models import CriterionResult, ScoringResult


class JsonReportGenerator(BaseReportGenerator):
    type_name = "JSON"

    def __init__(self):
        super().__init__("json", "application/json")

    def generate(self, result: ScoringResult, api_title: str | None = None) -> str:
        return json.dumps(self.build(result, api_title), indent=2, ensure_ascii=False)

    def build(self, result: ScoringResult, api_title: str | None = None) -> dict:
        percentages = [calculate_percentage(c.score, c.max_score) for c in result.criterion_results]
        return {
            "metadata": self.metadata(api_title),
            "summary": {
                "overallScore": result.overall_score,
                "grade": result.grade,
                "gradeDescription": grade_description(result.grade),
                "totalIssues": result.total_issues,
                "issueBreakdown": result.summary.model_dump(by_alias=True),
            },
            "analysis": {
                "criterionResults": [self._criterion(c) for c in result.criterion_results],
            },
            "statistics": {
                "criteriaCount": len(result.criterion_results),
                "passedCriteria": sum(1 for p in percentages if p >= 80),
                "averageScore": round_half_up(sum(percentages) / len(percentages)) if percentages else 0,
                "worstPerformingCriterion": self._brief(worst_criterion(result)) if percentages else None,
                "bestPerformingCriterion": self._brief(best_criterion(result)) if percentages else None,
            },
            "recommendations": recommendations(result),
        }

    @staticmethod
    def _criterion(criterion: CriterionResult) -> dict:
        return {
            "criterion": criterion.criterion,
            "score": criterion.score,
            "maxScore": criterion.max_score,
            "percentage": calculate_percentage(criterion.score, criterion.max_score),
            "weight": criterion.weight,
            "weightedScore": criterion.weighted_score,
            "issueCount": len(criterion.issues),
            "issues": [issue.model_dump(by_alias=True) for issue in criterion.issues],
        }

    @staticmethod
    def _brief(criterion: CriterionResult) -> dict:
        return {
            "criterion": criterion.criterion,
            "score": criterion.score,
            "maxScore": criterion.max_score,
            "percentage": calculate_percentage(criterion.score, criterion.max_score),
            "issueCount": len(criterion.issues),
        }
