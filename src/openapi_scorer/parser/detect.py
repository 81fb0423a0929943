"""Detect where a document comes from and which API description format it uses."""


def detect_source(source: str) -> str:
    """Return 'URL' for http(s) inputs and 'file' for everything else."""
    lowered = source.strip().lower()
    if lowered.startswith(("http://", "https://")):
        return "URL"
    return "file"


def detect_format(data) -> str:
    """Detect the format of a parsed document.

    Returns: 'openapi', 'swagger' or 'unknown'.
    """
    if isinstance(data, dict):
        if "openapi" in data:
            return "openapi"
        if "swagger" in data:
            return "swagger"
    return "unknown"
