"""CLI entry point for openapi-scorer."""

import time
from pathlib import Path

import click

from openapi_scorer.config import settings
from openapi_scorer.logging_setup import setup_logging
from openapi_scorer.parser.errors import ParserError
from openapi_scorer.parser.loader import load_document
from openapi_scorer.reporting.base import calculate_percentage, issue_location, severity_emoji
from openapi_scorer.reporting.manager import ReportManager
from openapi_scorer.scoring.engine import ScoringEngine
from openapi_scorer.scoring.models import SEVERITY_ORDER, ScoringResult

REPORT_FORMATS = ["json", "markdown", "html", "all", "none"]
PASSING_SCORE = 60
RULE = "=" * 50
THIN_RULE = "-" * 50


class LoadError(click.ClickException):
    """A document that could not be loaded; exits with status 1."""


def _load(source: str) -> dict:
    try:
        return load_document(source)
    except (ParserError, ValueError) as e:
        raise LoadError(str(e)) from e


def _configure_logging(verbose: bool, quiet: bool) -> None:
    if quiet:
        setup_logging("WARNING")
    elif verbose:
        setup_logging("DEBUG")
    else:
        setup_logging(settings.log_level)


def _print_result(result: ScoringResult, api_title: str) -> None:
    click.echo("")
    click.echo(RULE)
    click.echo("🎯 SCORING RESULTS")
    click.echo(RULE)
    click.echo(f"API: {api_title}")
    click.echo(f"Overall Score: {result.overall_score}/100 (Grade: {result.grade})")
    click.echo(f"Total Issues: {result.total_issues}")
    click.echo(f"  Critical: {result.summary.critical_issues}")
    click.echo(f"  High: {result.summary.high_issues}")
    click.echo(f"  Medium: {result.summary.medium_issues}")
    click.echo(f"  Low: {result.summary.low_issues}")

    click.echo("\n📈 CRITERION BREAKDOWN")
    click.echo(THIN_RULE)
    for criterion in result.criterion_results:
        percentage = calculate_percentage(criterion.score, criterion.max_score)
        status = "✅" if percentage >= 80 else "⚠️" if percentage >= 60 else "❌"
        click.echo(f"{status} {criterion.criterion}: {criterion.score}/{criterion.max_score} ({percentage}%)")


def _print_issues(result: ScoringResult, severity_threshold: str) -> None:
    allowed = SEVERITY_ORDER[: SEVERITY_ORDER.index(severity_threshold) + 1]
    click.echo("\n🔍 DETAILED ISSUES")
    click.echo(THIN_RULE)
    for criterion in result.criterion_results:
        issues = [issue for issue in criterion.issues if issue.severity in allowed]
        if not issues:
            continue
        click.echo(f"\n{criterion.criterion}:")
        for issue in issues:
            click.echo(f"  {severity_emoji(issue.severity)} {issue.description}")
            click.echo(f"     Location: {issue_location(issue)}")
            click.echo(f"     Suggestion: {issue.suggestion}")


def _exit_code(result: ScoringResult, fail_on_score: int | None) -> tuple[int, str]:
    if fail_on_score is not None and result.overall_score < fail_on_score:
        return 1, f"❌ Score {result.overall_score} is below threshold {fail_on_score}"
    if result.overall_score < PASSING_SCORE:
        return 1, f"⚠️  Warning: Score below {PASSING_SCORE}. Consider addressing critical issues."
    if result.summary.critical_issues:
        return 1, "⚠️  Warning: Critical issues found."
    return 0, ""


def _score(
    ctx: click.Context,
    source: str,
    output: Path,
    fmt: str,
    verbose: bool,
    fail_on_score: int | None = None,
    severity_threshold: str = "low",
    quiet: bool = False,
) -> None:
    started = time.monotonic()
    echo = (lambda *args, **kwargs: None) if quiet else click.echo

    echo("🔍 OpenAPI Scorer")
    echo(RULE)
    echo(f"📄 Loading OpenAPI specification from: {source}")
    document = _load(source)

    echo("🔬 Analyzing specification...")
    result = ScoringEngine().score(document)
    api_title = document.get("info", {}).get("title") or "Unknown API"

    files = []
    if fmt != "none":
        echo(f"📊 Generating {fmt} report(s)...")
        files = ReportManager().export_report(result, fmt, output, api_title)

    if not quiet:
        _print_result(result, api_title)
        if files:
            click.echo("\n📁 EXPORTED REPORTS")
            click.echo(THIN_RULE)
            for file in files:
                click.echo(f"📄 {file.name}")
                click.echo(f"   {file.resolve()}")
        click.echo(f"\n⏱️ Analysis completed in {time.monotonic() - started:.2f}s")
        if verbose and result.total_issues:
            _print_issues(result, severity_threshold)

    code, message = _exit_code(result, fail_on_score)
    if code:
        click.echo(f"\n{message}", err=quiet)
        ctx.exit(code)


@click.group()
@click.version_option(settings.version, prog_name="openapi-scorer")
def main():
    """OpenAPI Scorer - analyze and score OpenAPI 3 documents against API design best practices."""
    pass


@main.command()
@click.argument("source")
@click.option("-o", "--output", default=settings.output_dir, type=click.Path(path_type=Path), help="Output directory for reports.")
@click.option("-f", "--format", "fmt", default=settings.report_format, type=click.Choice(REPORT_FORMATS), help="Report format.")
@click.option("-v", "--verbose", is_flag=True, help="Show every issue and debug logs.")
@click.option("--fail-on-score", type=click.IntRange(0, 100), default=None, help="Exit with code 1 if the score is below this value.")
@click.option("--severity-threshold", default="low", type=click.Choice(list(reversed(SEVERITY_ORDER))), help="Only list issues at or above this severity.")
@click.option("--quiet", is_flag=True, help="Suppress all output except errors.")
@click.pass_context
def score(ctx, source: str, output: Path, fmt: str, verbose: bool, fail_on_score: int | None, severity_threshold: str, quiet: bool):
    """Score an OpenAPI document (file path or URL)."""
    _configure_logging(verbose, quiet)
    _score(ctx, source, output, fmt, verbose, fail_on_score, severity_threshold, quiet)


@main.command()
@click.argument("source")
def validate(source: str):
    """Validate an OpenAPI document without scoring it."""
    _configure_logging(False, True)
    click.echo("🔍 Validating OpenAPI specification...")
    document = _load(source)

    info = document.get("info", {})
    click.echo("✅ Specification is valid!")
    click.echo(f"📝 Title: {info.get('title') or 'N/A'}")
    click.echo(f"🔢 Version: {info.get('version') or 'N/A'}")
    click.echo(f"🛣️  Endpoints: {len(document.get('paths') or {})}")
    description = info.get("description")
    if description:
        suffix = "..." if len(description) > 100 else ""
        click.echo(f"📖 Description: {description[:100]}{suffix}")


@main.command()
@click.option("-o", "--output", default=settings.output_dir, type=click.Path(path_type=Path), help="Output directory for reports.")
@click.option("-f", "--format", "fmt", default=settings.report_format, type=click.Choice(REPORT_FORMATS), help="Report format.")
@click.option("-v", "--verbose", is_flag=True, help="Show every issue and debug logs.")
@click.pass_context
def demo(ctx, output: Path, fmt: str, verbose: bool):
    """Score the public Petstore example document."""
    _configure_logging(verbose, False)
    click.echo(f"🔗 Using example spec: {settings.example_spec_url}")
    _score(ctx, settings.example_spec_url, output, fmt, verbose)


@main.command()
@click.option("--host", default=settings.host, help="Interface to bind.")
@click.option("--port", default=settings.port, type=int, help="Port to listen on.")
def serve(host: str, port: int):
    """Run the HTTP API."""
    import uvicorn

    from openapi_scorer.server import create_app

    click.echo(f"🚀 OpenAPI Scorer API listening on http://{host}:{port}")
    uvicorn.run(create_app(), host=host, port=port)
