"""Paths & Operations: naming hygiene, REST method fit and operationIds."""

import re
from itertools import combinations

from openapi_scorer.analyzers.base import IssueCollector
from openapi_scorer.document import (
    as_list,
    as_mapping,
    is_item_path,
    iter_operations,
    normalize_path,
    operation_methods,
    path_parameters,
)
from openapi_scorer.scoring.config import PATHS_AND_OPERATIONS
from openapi_scorer.scoring.models import CriterionResult

KEBAB_CASE = re.compile(r"^[a-z][a-z0-9-]*$")
CAMEL_CASE = re.compile(r"^[a-z][a-zA-Z0-9]*$")

# Parameters that make a bulk DELETE on a collection acceptable.
FILTER_PARAMETERS = ("filter", "ids", "query")

OPERATION_ID_PREFIXES: dict[str, tuple[str, ...]] = {
    "get": ("get", "read", "fetch", "list", "retrieve"),
    "post": ("create", "add", "post", "insert"),
    "put": ("update", "put", "replace"),
    "patch": ("patch", "modify", "partial"),
    "delete": ("delete", "remove"),
}


def _is_placeholder(segment: str) -> bool:
    return segment.startswith("{") and segment.endswith("}")


class PathsAndOperationsAnalyzer:
    criterion = PATHS_AND_OPERATIONS

    def analyze(self, document: dict) -> CriterionResult:
        issues = IssueCollector(self.criterion)
        paths = {
            path: item for path, item in as_mapping(document.get("paths")).items()
            if isinstance(item, dict)
        }
        if paths:
            self._check_naming(issues, paths)
            self._check_parameter_consistency(issues, paths)
            self._check_crud_consistency(issues, paths)
            self._check_redundant_paths(issues, paths)
            self._check_operation_ids(issues, document)
        return issues.result(len(paths) * 2)

    def _check_naming(self, issues, paths):
        spellings: dict[str, list[str]] = {}

        for path in paths:
            if path != "/" and path.endswith("/"):
                issues.add(path, None, "", "Path has a trailing slash", "low", "Remove trailing slash for consistency")

            for segment in filter(None, path.split("/")):
                if _is_placeholder(segment):
                    name = segment[1:-1]
                    if not CAMEL_CASE.match(name):
                        issues.add(
                            path, None, segment,
                            f'Path parameter "{name}" does not follow camelCase naming convention',
                            "low",
                            "Use camelCase for path parameters",
                        )
                    continue

                if not KEBAB_CASE.match(segment):
                    issues.add(
                        path, None, segment,
                        f'Path segment "{segment}" does not follow kebab-case naming convention',
                        "low",
                        "Use kebab-case (lowercase with hyphens) for path segments",
                    )
                seen = spellings.setdefault(segment.lower(), [])
                if segment not in seen:
                    seen.append(segment)

        for lowered, variants in spellings.items():
            if len(variants) > 1:
                issues.add(
                    "paths", None, lowered,
                    f'Inconsistent casing for path segment "{lowered}" (found: {", ".join(variants)})',
                    "medium",
                    "Use consistent casing for the same path segments across all endpoints",
                )

    def _check_parameter_consistency(self, issues, paths):
        for first, second in combinations(paths, 2):
            if normalize_path(first) != normalize_path(second):
                continue
            first_params = list(dict.fromkeys(path_parameters(first)))
            second_params = list(dict.fromkeys(path_parameters(second)))

            if len(first_params) != len(second_params):
                issues.add(
                    "paths", None, f"{first} vs {second}",
                    "Similar paths use different number of parameters",
                    "medium",
                    "Use consistent parameter naming across similar paths",
                )
                continue
            for left, right in zip(first_params, second_params):
                if left != right:
                    issues.add(
                        "paths", None, f"{first} vs {second}",
                        f"Similar paths use different parameter names ({left} vs {right})",
                        "medium",
                        "Use consistent parameter naming across similar paths",
                    )

    def _check_crud_consistency(self, issues, paths):
        for path, path_item in paths.items():
            if not list(filter(None, path.split("/"))):
                continue
            methods = operation_methods(path_item)

            if is_item_path(path):
                if "post" in methods:
                    issues.add(
                        path, "post", "",
                        "Using POST on an individual resource path",
                        "medium",
                        "POST is typically used for collection resources, not individual items",
                    )
                continue

            if "put" in methods or "patch" in methods:
                method = "put" if "put" in methods else "patch"
                issues.add(
                    path, method, "",
                    f"Using {method.upper()} on a collection resource",
                    "medium",
                    "PUT/PATCH should typically be used on individual resources, not collections",
                )

            if "delete" in methods:
                parameters = as_list(path_item["delete"].get("parameters"))
                has_filter = any(
                    isinstance(p, dict) and p.get("name") in FILTER_PARAMETERS for p in parameters
                )
                if not has_filter:
                    issues.add(
                        path, "delete", "",
                        "DELETE operation on a collection resource without filtering parameters",
                        "medium",
                        "Add filter parameters or use DELETE only on individual resources",
                    )

    def _check_redundant_paths(self, issues, paths):
        groups: dict[str, list[str]] = {}
        for path in paths:
            groups.setdefault(normalize_path(path), []).append(path)

        for group in groups.values():
            for first, second in combinations(group, 2):
                second_methods = operation_methods(paths[second])
                overlapping = [m for m in operation_methods(paths[first]) if m in second_methods]
                if overlapping:
                    issues.add(
                        "paths", None, f"{first} vs {second}",
                        f"Potentially redundant paths with overlapping operations ({', '.join(overlapping)})",
                        "high",
                        "Consider consolidating these paths or ensuring they serve different purposes",
                    )

    def _check_operation_ids(self, issues, document):
        seen: set[str] = set()
        seen_lower: set[str] = set()

        for path, method, operation in iter_operations(document):
            operation_id = operation.get("operationId")
            if not operation_id or not isinstance(operation_id, str):
                issues.add(
                    path, method, "operationId",
                    "Operation is missing an operationId",
                    "medium",
                    "Add a unique operationId to help with SDK generation and client usage",
                )
                continue

            lowered = operation_id.lower()
            if operation_id in seen:
                issues.add(
                    path, method, "operationId",
                    f'Duplicate operationId: "{operation_id}"',
                    "high",
                    "Use unique operationIds across all operations",
                )
            elif lowered in seen_lower:
                issues.add(
                    path, method, "operationId",
                    f'Case-insensitive duplicate operationId: "{operation_id}"',
                    "medium",
                    "Use operationIds that are unique even when case is ignored",
                )

            if not CAMEL_CASE.match(operation_id):
                issues.add(
                    path, method, "operationId",
                    f'OperationId "{operation_id}" does not follow camelCase naming convention',
                    "low",
                    "Use camelCase for operationIds",
                )

            prefixes = OPERATION_ID_PREFIXES.get(method)
            if prefixes and not lowered.startswith(prefixes):
                issues.add(
                    path, method, "operationId",
                    f'OperationId "{operation_id}" does not indicate the HTTP method ({method.upper()})',
                    "low",
                    f"Consider prefixing operationId with {', '.join(prefixes)} to indicate the operation type",
                )

            seen.add(operation_id)
            seen_lower.add(lowered)
