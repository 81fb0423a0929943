"""Load an OpenAPI 3 document from a file or URL.

The loader parses YAML or JSON, checks the outer shape of the document, makes
sure every ``$ref`` points at something inside it and validates the result
against the OpenAPI schema with openapi-spec-validator. References are left
in place; analyzers treat them as opaque pointers.
"""

import logging
from pathlib import Path

import jsonschema
import requests
import yaml
from openapi_spec_validator import validate
from pydantic import ValidationError
from referencing import Registry, Resource
from referencing.exceptions import Unresolvable

from openapi_scorer.config import settings
from openapi_scorer.parser.base import OpenApiDocument
from openapi_scorer.parser.detect import detect_format, detect_source
from openapi_scorer.parser.errors import (
    ConnectionParserError,
    ResolverParserError,
    SyntaxParserError,
    ValidationParserError,
)

logger = logging.getLogger(__name__)


def load_document(source: str) -> dict:
    """Fetch, parse and check the document at ``source`` (path or URL)."""
    if not source or not source.strip():
        raise ValueError("Input cannot be empty")

    logger.info("Loading OpenAPI spec from: %s", source)
    if detect_source(source) == "URL":
        text = _fetch_url(source)
    else:
        text = _read_file(source)
    return load_document_text(text, source)


def load_document_text(text: str, source: str) -> dict:
    """Parse and check document text; ``source`` is only used in messages."""
    kind = detect_source(source)
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SyntaxParserError(kind, source, str(e)) from e
    if not isinstance(data, dict):
        raise SyntaxParserError(kind, source, "Document root must be a mapping")
    _stringify_keys(data)

    if detect_format(data) == "swagger":
        raise ValidationParserError(kind, source, "Swagger 2.0 documents are not supported, convert to OpenAPI 3")
    try:
        parsed = OpenApiDocument.model_validate(data)
    except ValidationError as e:
        raise ValidationParserError(kind, source, str(e)) from e

    unresolved = _unresolved_refs(data)
    if unresolved:
        raise ResolverParserError(kind, source, "Cannot resolve: " + ", ".join(unresolved))

    if _has_alias_cycle(data):
        # jsonschema cannot walk a self-containing instance
        logger.warning("Document contains recursive YAML aliases, skipping OpenAPI schema validation")
    else:
        _validate_schema(data, kind, source)

    logger.info("Successfully validated OpenAPI spec")
    logger.info("Title: %s", parsed.info.title)
    logger.info("Version: %s", parsed.info.version)
    logger.info("Endpoints: %d", parsed.endpoint_count)
    return data


def _read_file(source: str) -> str:
    path = Path(source)
    if not path.is_file():
        raise ConnectionParserError("file", source, "File not found:")
    return path.read_text(encoding="utf-8")


def _fetch_url(url: str) -> str:
    try:
        response = requests.get(url, timeout=settings.request_timeout)
    except requests.ConnectionError as e:
        raise ConnectionParserError("URL", url, "Connection refused to:") from e
    except requests.RequestException as e:
        raise ConnectionParserError("URL", url, f"Failed to fetch ({e}):") from e

    if response.status_code == 404:
        raise ConnectionParserError("URL", url, "URL not found:")
    if response.status_code >= 400:
        raise ConnectionParserError("URL", url, f"HTTP {response.status_code} from")
    return response.text


def _validate_schema(data: dict, kind: str, source: str) -> None:
    try:
        validate(data)
    except jsonschema.ValidationError as e:
        location = "/".join(str(part) for part in e.absolute_path)
        message = f"{e.message} (at {location})" if location else e.message
        raise ValidationParserError(kind, source, message) from e
    except Unresolvable as e:
        raise ResolverParserError(kind, source, f"Cannot resolve: {e.ref}") from e


def _stringify_keys(node, seen=None) -> None:
    """YAML reads unquoted status codes such as ``200:`` as integers."""
    seen = set() if seen is None else seen
    if not isinstance(node, (dict, list)) or id(node) in seen:
        return
    seen.add(id(node))
    if isinstance(node, dict):
        if any(isinstance(key, int) and not isinstance(key, bool) for key in node):
            items = list(node.items())
            node.clear()
            node.update((str(key) if isinstance(key, int) and not isinstance(key, bool) else key, value) for key, value in items)
        children = list(node.values())
    else:
        children = node
    for child in children:
        _stringify_keys(child, seen)


def _iter_refs(node, seen=None):
    seen = set() if seen is None else seen
    if not isinstance(node, (dict, list)) or id(node) in seen:
        return
    seen.add(id(node))
    if isinstance(node, dict):
        ref = node.get("$ref")
        if isinstance(ref, str):
            yield ref
        node = node.values()
    for value in node:
        yield from _iter_refs(value, seen)


def _unresolved_refs(data: dict) -> list[str]:
    """Every ``$ref`` that does not point inside the document. External references never resolve."""
    resolver = Registry().with_resource("", Resource.opaque(data)).resolver()
    unresolved = set()
    for ref in _iter_refs(data):
        if not ref.startswith("#"):
            unresolved.add(ref)
            continue
        try:
            resolver.lookup(ref)
        except (Unresolvable, TypeError, ValueError):
            unresolved.add(ref)
    return sorted(unresolved)


def _has_alias_cycle(node, ancestors=None, finished=None) -> bool:
    ancestors = set() if ancestors is None else ancestors
    finished = set() if finished is None else finished
    if not isinstance(node, (dict, list)) or id(node) in finished:
        return False
    if id(node) in ancestors:
        return True
    ancestors.add(id(node))
    children = node.values() if isinstance(node, dict) else node
    if any(_has_alias_cycle(child, ancestors, finished) for child in children):
        return True
    ancestors.discard(id(node))
    finished.add(id(node))
    return False
