"""Dispatches a ScoringResult to the registered report generators."""

import logging
import time
from pathlib import Path

from openapi_scorer.reporting.base import BaseReportGenerator
from openapi_scorer.reporting.html_report import HtmlReportGenerator
from openapi_scorer.reporting.json_report import JsonReportGenerator
from openapi_scorer.reporting.markdown_report import MarkdownReportGenerator
from openapi_scorer.scoring.models import ScoringResult

logger = logging.getLogger(__name__)

ALL_FORMATS = "all"
SEVEN_DAYS = 7 * 24 * 60 * 60


class ReportManager:
    def __init__(self):
        self.generators: dict[str, BaseReportGenerator] = {
            "json": JsonReportGenerator(),
            "markdown": MarkdownReportGenerator(),
            "html": HtmlReportGenerator(),
        }

    def available_formats(self) -> list[str]:
        return list(self.generators)

    def is_format_supported(self, fmt: str) -> bool:
        return fmt in self.generators

    def export_report(
        self,
        result: ScoringResult,
        fmt: str,
        output_dir: str | Path,
        api_title: str | None = None,
    ) -> list[Path]:
        """Write one report per requested format and return the written paths.

        ``fmt`` is a generator name or ``"all"``. Unknown formats and failing
        generators are logged and skipped.
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        formats = self.available_formats() if fmt == ALL_FORMATS else [fmt]

        exported = []
        for name in formats:
            generator = self.generators.get(name)
            if generator is None:
                logger.warning("No generator found for format: %s", name)
                continue
            file_path = output_dir / generator.generate_file_name(api_title)
            try:
                exported.append(generator.export(result, file_path, api_title))
            except OSError:
                logger.exception("Failed to generate %s report", name)
        return exported

    def generate_report(self, result: ScoringResult, fmt: str, api_title: str | None = None) -> str:
        """Render a report in memory. Raises ValueError for unknown formats."""
        generator = self.generators.get(fmt)
        if generator is None:
            raise ValueError(f"No generator found for format: {fmt}")
        return generator.generate(result, api_title)

    def generate_multiple_formats(
        self, result: ScoringResult, formats: list[str], api_title: str | None = None
    ) -> dict[str, str]:
        return {
            fmt: self.generate_report(result, fmt, api_title)
            for fmt in formats
            if self.is_format_supported(fmt)
        }

    @staticmethod
    def export_summary(files: list[Path]) -> str:
        lines = ["📊 Export Summary", f"✅ Generated: {len(files)} file(s)"]
        if files:
            lines += ["", "📁 Generated Files:"]
            for file in files:
                file = Path(file)
                lines.append(f"  • {file.suffix.lstrip('.').upper()}: {file.name}")
        return "\n".join(lines)

    @staticmethod
    def cleanup_old_reports(output_dir: str | Path, max_age_seconds: float = SEVEN_DAYS) -> int:
        """Delete files in ``output_dir`` older than ``max_age_seconds``; return how many."""
        output_dir = Path(output_dir)
        if not output_dir.is_dir():
            return 0

        now = time.time()
        deleted = 0
        for file in output_dir.iterdir():
            if not file.is_file() or now - file.stat().st_mtime <= max_age_seconds:
                continue
            try:
                file.unlink()
            except OSError as e:
                logger.warning("Failed to delete %s: %s", file.name, e)
                continue
            deleted += 1
            logger.info("Deleted old report: %s", file.name)
        return deleted
