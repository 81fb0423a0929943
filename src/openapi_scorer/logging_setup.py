"""Logging configuration shared by the CLI and the HTTP server."""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Send package logs to the current stderr at ``level``.

    Calling again replaces the previously installed handler.
    """
    logger = logging.getLogger("openapi_scorer")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in [h for h in logger.handlers if getattr(h, "_openapi_scorer", False)]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._openapi_scorer = True
    logger.addHandler(handler)
