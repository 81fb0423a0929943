"""Self-contained HTML report with inline CSS."""

from datetime import datetime
from html import escape

from openapi_scorer.reporting.base import BaseReportGenerator, calculate_percentage, severity_emoji
from openapi_scorer.reporting.markdown_report import status_text
from openapi_scorer.scoring.config import grade_description, round_half_up
from openapi_scorer.scoring.models import CriterionResult, Issue, ScoringResult

STYLES = """
    :root {
      --primary: #4a5568; --success: #38a169; --warning: #d69e2e; --danger: #e53e3e;
      --shadow: 0 10px 30px rgba(0,0,0,0.1); --radius: 15px;
    }
    * { margin: 0; padding: 0; box-sizing: border-box; }
    body {
      font-family: 'Segoe UI', -apple-system, BlinkMacSystemFont, 'Roboto', sans-serif;
      line-height: 1.6; color: var(--primary);
      background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); min-height: 100vh;
    }
    .container { max-width: 1400px; margin: 0 auto; padding: 20px; }
    .header, .summary, .criterion-card {
      background: white; border-radius: var(--radius); box-shadow: var(--shadow);
    }
    .header { padding: 40px; margin-bottom: 30px; text-align: center; }
    .header h1 { font-size: 2.5em; font-weight: 300; }
    .header h2 { color: #718096; font-weight: 400; margin-bottom: 20px; }
    .score-card {
      display: inline-block; color: white; padding: 25px 50px; border-radius: 50px;
      font-size: 1.8em; font-weight: bold; margin: 20px 0;
    }
    .timestamp { color: #a0aec0; font-size: 0.9em; }
    .summary { padding: 35px; margin-bottom: 30px; }
    .summary-grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(180px, 1fr)); gap: 20px; }
    .summary-item { padding: 20px; border-left: 5px solid var(--primary); background: #f7fafc; border-radius: 8px; }
    .summary-value { font-size: 2em; font-weight: bold; }
    .criteria-grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(420px, 1fr)); gap: 25px; }
    .criterion-card { padding: 25px; }
    .criterion-header { display: flex; justify-content: space-between; align-items: center; }
    .score-badge { color: white; padding: 6px 16px; border-radius: 20px; font-weight: bold; }
    .progress-bar { height: 10px; background: #e2e8f0; border-radius: 5px; overflow: hidden; margin: 8px 0 15px; }
    .progress-fill { height: 100%; }
    .issue-item { border-left: 4px solid #cbd5e0; padding: 10px 15px; margin: 10px 0; background: #f7fafc; }
    .issue-critical { border-left-color: var(--danger); }
    .issue-high { border-left-color: #dd6b20; }
    .issue-medium { border-left-color: var(--warning); }
    .issue-low { border-left-color: var(--success); }
    .severity-badge { text-transform: uppercase; font-size: 0.75em; font-weight: bold; }
    .issue-location { font-family: monospace; color: #718096; font-size: 0.9em; }
    .no-issues { color: var(--success); text-align: center; padding: 15px; }
    footer { text-align: center; color: white; padding: 30px; }
"""


def score_color(percentage: float) -> str:
    if percentage >= 90:
        return "#38a169"
    if percentage >= 80:
        return "#68d391"
    if percentage >= 70:
        return "#d69e2e"
    if percentage >= 60:
        return "#dd6b20"
    return "#e53e3e"


def issue_status_text(count: int) -> str:
    if count == 0:
        return "Perfect!"
    if count < 5:
        return "Good"
    if count < 15:
        return "Needs Work"
    return "Needs Attention"


class HtmlReportGenerator(BaseReportGenerator):
    type_name = "HTML"

    def __init__(self):
        super().__init__("html", "text/html")

    def generate(self, result: ScoringResult, api_title: str | None = None) -> str:
        title = escape(api_title or "Unknown API")
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        cards = "".join(self._criterion_card(criterion) for criterion in result.criterion_results)
        return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>OpenAPI Score Report - {title}</title>
  <style>{STYLES}</style>
</head>
<body>
  <div class="container">
    <header class="header">
      <h1>🔍 OpenAPI Score Report</h1>
      <h2>{title}</h2>
      <div class="score-card" style="background: {score_color(result.overall_score)};">
        {result.overall_score}/100 | Grade: {escape(result.grade)}
      </div>
      <div class="timestamp">📅 Generated on {timestamp} | 🏆 {escape(grade_description(result.grade))}</div>
    </header>
{self._summary(result)}
    <section class="criteria-section">
      <div class="criteria-grid">{cards}
      </div>
    </section>
    <footer>Generated by {escape(self.metadata()["generator"])}</footer>
  </div>
</body>
</html>
"""

    @staticmethod
    def _summary(result: ScoringResult) -> str:
        summary = result.summary
        items = [
            ("Total Issues", result.total_issues, "var(--primary)", issue_status_text(result.total_issues)),
            ("Critical Issues", summary.critical_issues, "var(--danger)",
             "Perfect!" if summary.critical_issues == 0 else "Needs Attention"),
            ("High Priority", summary.high_issues, "#dd6b20", "Great!" if summary.high_issues == 0 else "Address Soon"),
            ("Medium Priority", summary.medium_issues, "var(--warning)", "Improvements"),
            ("Low Priority", summary.low_issues, "var(--success)", "Minor Tweaks"),
        ]
        rendered = "".join(
            f"""
        <div class="summary-item" style="border-left-color: {color};">
          <h3>{label}</h3>
          <div class="summary-value" style="color: {color};">{count}</div>
          <div class="summary-label">{note}</div>
        </div>"""
            for label, count, color, note in items
        )
        return f"""    <section class="summary">
      <h2>📊 Executive Summary</h2>
      <div class="summary-grid">{rendered}
      </div>
    </section>"""

    def _criterion_card(self, criterion: CriterionResult) -> str:
        percentage = calculate_percentage(criterion.score, criterion.max_score)
        color = score_color(percentage)
        return f"""
        <article class="criterion-card">
          <div class="criterion-header">
            <h3 class="criterion-title">{escape(criterion.criterion)}</h3>
            <div class="score-badge" style="background: {color};">{criterion.score}/{criterion.max_score}</div>
          </div>
          <p>Weight: {round_half_up(criterion.weight * 100)}% | Weighted Score: {criterion.weighted_score:.1f}</p>
          <p>Score: {percentage}% | {status_text(percentage)}</p>
          <div class="progress-bar"><div class="progress-fill" style="width: {percentage}%; background: {color};"></div></div>
          {self._issues(criterion.issues)}
        </article>"""

    def _issues(self, issues) -> str:
        if not issues:
            return '<div class="no-issues">Perfect Score!<br><small>No issues found in this category</small></div>'
        items = "".join(self._issue_item(issue) for issue in issues)
        return f'<div class="issues-section"><h4>🔍 Issues Found ({len(issues)})</h4>{items}</div>'

    @staticmethod
    def _issue_item(issue: Issue) -> str:
        location = escape(issue.path)
        if issue.operation:
            location += f" → {escape(issue.operation)}"
        location += f" → {escape(issue.location)}"
        return f"""
            <div class="issue-item issue-{issue.severity}">
              <span class="severity-badge">{issue.severity}</span> {severity_emoji(issue.severity)}
              <div class="issue-description">{escape(issue.description)}</div>
              <div class="issue-location">📍 {location}</div>
              <div class="issue-suggestion">💡 <strong>Suggestion:</strong> {escape(issue.suggestion)}</div>
            </div>"""
