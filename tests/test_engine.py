import copy

import pytest

from openapi_scorer.parser.loader import load_document_text
from openapi_scorer.scoring.config import BEST_PRACTICES, CRITERIA, SECURITY, get_criterion, round_half_up
from openapi_scorer.scoring.engine import AnalyzerFailure, AnalyzerSuccess, ScoringEngine, default_analyzers


class BrokenAnalyzer:
    criterion = SECURITY

    def analyze(self, document):
        raise RuntimeError("boom")


def engine_with_broken_security():
    analyzers = [a for a in default_analyzers() if a.criterion != SECURITY]
    return ScoringEngine(analyzers + [BrokenAnalyzer()])


class TestScoringEngine:
    def test_petstore_scores_perfectly(self, petstore):
        result = ScoringEngine().score(petstore)
        assert result.overall_score == 100
        assert result.grade == "A"
        assert result.total_issues == 0
        assert [r.criterion for r in result.criterion_results] == [c.name for c in CRITERIA]

    def test_minimal_document(self, minimal):
        result = ScoringEngine().score(minimal)
        assert result.overall_score == 87
        assert result.grade == "B"
        assert result.total_issues == 7
        summary = result.summary
        assert (summary.critical_issues, summary.high_issues, summary.medium_issues, summary.low_issues) == (0, 1, 4, 2)

    def test_poor_document(self, poor):
        result = ScoringEngine().score(poor)
        assert result.overall_score < 60
        assert result.grade == "F"
        assert result.summary.critical_issues == 1

    def test_overall_is_rounded_sum_of_weighted_scores(self, poor):
        result = ScoringEngine().score(poor)
        assert result.overall_score == round_half_up(sum(r.weighted_score for r in result.criterion_results))
        for r in result.criterion_results:
            assert 0 <= r.score <= r.max_score
            assert r.weighted_score == pytest.approx(r.score / r.max_score * r.weight * 100)

    def test_totals_match_issue_lists(self, poor):
        result = ScoringEngine().score(poor)
        summary = result.summary
        assert result.total_issues == len(result.issues)
        assert result.total_issues == (
            summary.critical_issues + summary.high_issues + summary.medium_issues + summary.low_issues
        )

    def test_scoring_is_repeatable_and_does_not_mutate(self, poor):
        original = copy.deepcopy(poor)
        engine = ScoringEngine()
        assert engine.score(poor) == engine.score(poor)
        assert poor == original

    def test_available_criteria(self):
        engine = ScoringEngine()
        assert engine.available_criteria() == [c.name for c in CRITERIA]
        assert engine.has_analyzer(SECURITY)
        assert not engine.has_analyzer("Performance")

    def test_missing_analyzer_is_rejected(self):
        with pytest.raises(KeyError):
            ScoringEngine([a for a in default_analyzers() if a.criterion != SECURITY])


class TestFailSoft:
    def test_failure_becomes_critical_issue(self, petstore):
        result = engine_with_broken_security().score(petstore)
        security = next(r for r in result.criterion_results if r.criterion == SECURITY)
        assert security.score == 0
        assert security.weighted_score == 0
        assert len(security.issues) == 1
        issue = security.issues[0]
        assert issue.severity == "critical"
        assert issue.path == "N/A"
        assert issue.location == "Analyzer"
        assert issue.description == "Failed to analyze: boom"

        assert result.overall_score == 90
        assert result.summary.critical_issues == 1
        assert len(result.criterion_results) == len(CRITERIA)

    def test_run_analyzer_outcomes(self, petstore):
        engine = engine_with_broken_security()
        ok = engine.run_analyzer(get_criterion("Response Codes"), petstore)
        failed = engine.run_analyzer(get_criterion(SECURITY), petstore)
        assert isinstance(ok, AnalyzerSuccess)
        assert ok.result.score == 15
        assert isinstance(failed, AnalyzerFailure)
        assert str(failed.error) == "boom"


RECURSIVE_DOCUMENT = """
openapi: 3.0.3
info:
  title: Tree API
  version: 1.0.0
paths:
  /nodes:
    get:
      operationId: listNodes
      responses:
        '200':
          description: The whole node tree
          content:
            application/json:
              schema: &node
                type: object
                properties:
                  name:
                    type: string
                  children:
                    type: array
                    items: *node
components:
  schemas:
    Tag:
      type: string
"""


class TestRecursiveDocuments:
    def test_yaml_alias_cycle_is_scored(self):
        document = load_document_text(RECURSIVE_DOCUMENT, "tree.yaml")
        engine = ScoringEngine()
        result = engine.score(document)

        assert result.summary.critical_issues == 0
        assert not any(i.description.startswith("Failed to analyze") for i in result.issues)
        cycles = [i for i in result.issues if "refers back to one of its own ancestors" in i.description]
        assert len(cycles) == 1
        assert cycles[0].criterion == "Schema & Types"

        conventions = next(r for r in result.criterion_results if r.criterion == BEST_PRACTICES)
        assert conventions.score == 1
        assert engine.score(document) == result
