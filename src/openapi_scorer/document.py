"""Read-only helpers for walking a loaded OpenAPI 3 document.

Documents are the plain ``dict`` trees produced by the loader. Anything that
does not have the expected shape is skipped rather than reported here.
"""

import re
from collections.abc import Iterator

HTTP_METHODS = ("get", "post", "put", "delete", "options", "head", "patch", "trace")
WRITE_METHODS = ("post", "put", "patch", "delete")
COMPOSITION_KEYWORDS = ("allOf", "oneOf", "anyOf")
REUSABLE_COMPONENTS = ("schemas", "parameters", "requestBodies", "responses")

# Deepest schema nesting walked before a branch is abandoned.
MAX_SCHEMA_DEPTH = 32

_PLACEHOLDER = re.compile(r"\{([^}]+)\}")
_ITEM_PATH = re.compile(r"/\{[^}]+\}$")


def is_reference(node) -> bool:
    return isinstance(node, dict) and "$ref" in node


def as_mapping(value) -> dict:
    return value if isinstance(value, dict) else {}


def as_list(value) -> list:
    return value if isinstance(value, list) else []


def operation_methods(path_item) -> list[str]:
    """HTTP methods defined on a path item, in canonical order."""
    path_item = as_mapping(path_item)
    return [m for m in HTTP_METHODS if isinstance(path_item.get(m), dict)]


def iter_operations(document: dict) -> Iterator[tuple[str, str, dict]]:
    """Yield (path, method, operation) for every operation in the document."""
    for path, path_item in as_mapping(document.get("paths")).items():
        if not isinstance(path_item, dict):
            continue
        for method in operation_methods(path_item):
            yield path, method, path_item[method]


def components(document: dict, section: str) -> dict:
    """One section of ``components`` (schemas, parameters ...) or an empty dict."""
    return as_mapping(as_mapping(document.get("components")).get(section))


def media_types(container) -> Iterator[tuple[str, dict]]:
    """Yield (media_type, media_type_object) pairs from a ``content`` holder."""
    for media_type, media in as_mapping(as_mapping(container).get("content")).items():
        if isinstance(media, dict):
            yield media_type, media


def description_length(node) -> int:
    text = as_mapping(node).get("description")
    return len(text.strip()) if isinstance(text, str) else 0


def is_item_path(path: str) -> bool:
    """True when the path ends in a ``{param}`` segment."""
    return bool(_ITEM_PATH.search(path))


def normalize_path(path: str) -> str:
    return _PLACEHOLDER.sub("{param}", path)


def path_parameters(path: str) -> list[str]:
    return _PLACEHOLDER.findall(path)


def walk_schema(schema, location: str, visit, depth: int = 0, ancestors: tuple = ()):
    """Depth-first walk over inline schema nodes.

    ``visit(node, location, depth)`` is called for every non-reference mapping
    and may return False to stop descending below that node. Descent follows
    ``properties``, ``items`` and the composition keywords, and never follows
    ``$ref``. Returns an ``(kind, location)`` tuple for the first branch cut
    short by a cycle (``"cycle"``) or by ``MAX_SCHEMA_DEPTH`` (``"depth"``),
    None otherwise.
    """
    if not isinstance(schema, dict) or is_reference(schema):
        return None
    if id(schema) in ancestors:
        return ("cycle", location)
    if depth > MAX_SCHEMA_DEPTH:
        return ("depth", location)
    if visit(schema, location, depth) is False:
        return None

    ancestors = ancestors + (id(schema),)
    cut = None
    children = [
        (child, f"{location}/properties/{name}")
        for name, child in as_mapping(schema.get("properties")).items()
    ]
    if isinstance(schema.get("items"), dict):
        children.append((schema["items"], f"{location}/items"))
    for keyword in COMPOSITION_KEYWORDS:
        for index, child in enumerate(as_list(schema.get(keyword))):
            children.append((child, f"{location}/{keyword}/{index}"))

    for child, child_location in children:
        result = walk_schema(child, child_location, visit, depth + 1, ancestors)
        cut = cut or result
    return cut
