"""FastAPI application: score uploaded files or remote URLs over HTTP."""

import logging
from pathlib import Path

from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from openapi_scorer.config import settings
from openapi_scorer.logging_setup import setup_logging
from openapi_scorer.parser.errors import ParserError
from openapi_scorer.parser.loader import load_document, load_document_text
from openapi_scorer.reporting.manager import ALL_FORMATS, ReportManager
from openapi_scorer.scoring.engine import ScoringEngine

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = (".yaml", ".yml", ".json")


class ScoreUrlRequest(BaseModel):
    """Request body for scoring a remote document."""
    url: str = ""
    format: str = ALL_FORMATS


def create_app(output_dir: str | Path | None = None) -> FastAPI:
    """Create the FastAPI application; reports are written to and served from ``output_dir``."""
    setup_logging(settings.log_level)
    reports_dir = Path(output_dir or settings.output_dir)
    reports_dir.mkdir(parents=True, exist_ok=True)

    engine = ScoringEngine()
    reporter = ReportManager()

    app = FastAPI(
        title=settings.app_name,
        version=settings.version,
        description="Score OpenAPI 3 documents against API design best practices",
    )
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    app.mount("/reports", StaticFiles(directory=reports_dir), name="reports")

    def score_and_report(document: dict, fmt: str, fallback_title: str) -> dict:
        if fmt != ALL_FORMATS and not reporter.is_format_supported(fmt):
            raise HTTPException(status_code=400, detail=f"Unsupported report format: {fmt}")

        result = engine.score(document)
        api_title = document.get("info", {}).get("title") or fallback_title
        files = reporter.export_report(result, fmt, reports_dir, api_title)
        return {
            "success": True,
            "apiTitle": api_title,
            "score": result.model_dump(by_alias=True, mode="json"),
            "reports": [
                {"format": file.suffix.lstrip("."), "filename": file.name, "url": f"/reports/{file.name}"}
                for file in files
            ],
        }

    def score_upload(contents: bytes, filename: str, fmt: str) -> dict:
        try:
            text = contents.decode("utf-8")
        except UnicodeDecodeError as e:
            raise HTTPException(status_code=400, detail="File is not valid UTF-8") from e
        document = load_document_text(text, filename)
        return score_and_report(document, fmt, Path(filename).stem)

    @app.get("/api/health")
    def health():
        return {"status": "OK"}

    @app.post("/api/upload")
    async def upload_spec(spec: UploadFile | None = File(None), format: str = Form(ALL_FORMATS)):
        """Score an uploaded YAML or JSON document."""
        if spec is None or not spec.filename:
            raise HTTPException(status_code=400, detail="No file uploaded")
        if not spec.filename.lower().endswith(ALLOWED_EXTENSIONS):
            raise HTTPException(status_code=400, detail="Only YAML and JSON files are allowed")

        contents = await spec.read()
        if len(contents) > settings.max_upload_size:
            raise HTTPException(status_code=413, detail="File too large")

        logger.info("Processing upload: %s (%d bytes)", spec.filename, len(contents))
        return await run_in_threadpool(score_upload, contents, spec.filename, format)

    @app.post("/api/score-url")
    def score_url(request: ScoreUrlRequest):
        """Fetch and score a remote document."""
        if not request.url:
            raise HTTPException(status_code=400, detail="URL is required")
        logger.info("Processing URL: %s", request.url)
        document = load_document(request.url)
        return score_and_report(document, request.format, "Remote API")

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(status_code=exc.status_code, content={"success": False, "error": exc.detail})

    @app.exception_handler(ParserError)
    async def parser_error_handler(request: Request, exc: ParserError):
        logger.warning("Rejected document: %s", exc)
        return JSONResponse(status_code=400, content={"success": False, "error": str(exc)})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error("Unhandled error: %s", exc, exc_info=True)
        return JSONResponse(status_code=500, content={"success": False, "error": "Internal server error"})

    return app
