"""Examples & Samples: example coverage of payloads, responses and parameters."""

from openapi_scorer.analyzers.base import IssueCollector
from openapi_scorer.document import (
    as_list,
    as_mapping,
    components,
    is_reference,
    iter_operations,
    media_types,
)
from openapi_scorer.scoring.config import EXAMPLES
from openapi_scorer.scoring.models import CriterionResult

BODY_METHODS = ("post", "put", "patch")


def _has_example_key(node) -> bool:
    node = as_mapping(node)
    return "example" in node or "examples" in node


def _content_has_example(holder: dict) -> bool:
    """True when any media type carries an example itself or on its schema."""
    for _, media in media_types(holder):
        if _has_example_key(media) or _has_example_key(media.get("schema")):
            return True
    return False


def _parameter_lacks_example(param: dict) -> bool:
    return (
        bool(param.get("required"))
        and not _has_example_key(param)
        and isinstance(param.get("schema"), dict)
        and not _has_example_key(param["schema"])
    )


class ExamplesAnalyzer:
    criterion = EXAMPLES

    def analyze(self, document: dict) -> CriterionResult:
        issues = IssueCollector(self.criterion)
        for path, method, operation in iter_operations(document):
            self._check_operation(issues, path, method, operation)
        self._check_components(issues, document)
        return issues.result(self._count_checkable(document))

    def _count_checkable(self, document: dict) -> int:
        count = len(components(document, "schemas"))
        for _, _, operation in iter_operations(document):
            count += 1 if operation.get("requestBody") else 0
            count += sum(1 for status in as_mapping(operation.get("responses")) if str(status).startswith("2"))
        return count

    def _check_operation(self, issues, path, method, operation):
        request_body = operation.get("requestBody")
        if (
            isinstance(request_body, dict)
            and not is_reference(request_body)
            and "content" in request_body
            and not _content_has_example(request_body)
        ):
            issues.add(
                path, method, "requestBody",
                f"Request body for {method.upper()} {path} lacks examples",
                "high" if method in BODY_METHODS else "medium",
                "Add examples to illustrate expected request format",
            )

        for status, response in as_mapping(operation.get("responses")).items():
            if not str(status).startswith("2"):
                continue
            if is_reference(response) or not isinstance(response, dict) or "content" not in response:
                continue
            if not _content_has_example(response):
                issues.add(
                    path, method, f"responses.{status}",
                    f"Response {status} for {method.upper()} {path} lacks examples",
                    "medium",
                    "Add examples to illustrate expected response format",
                )

        for param in as_list(operation.get("parameters")):
            if is_reference(param) or not isinstance(param, dict):
                continue
            if _parameter_lacks_example(param):
                name = param.get("name", "")
                issues.add(
                    path, method, f"parameters.{name}",
                    f'Required parameter "{name}" (in {param.get("in", "")}) lacks examples',
                    "low",
                    "Add an example to help consumers understand expected parameter values",
                )

    def _check_components(self, issues, document):
        for name, schema in components(document, "schemas").items():
            if is_reference(schema) or not isinstance(schema, dict):
                continue
            if schema.get("type") in ("object", "array", None) and not _has_example_key(schema):
                issues.add(
                    "components/schemas", None, name,
                    f'Schema "{name}" lacks examples',
                    "medium",
                    "Add examples to illustrate valid schema values",
                )

        for section, label, suggestion in (
            ("requestBodies", "Request body", "Add examples to illustrate expected request format"),
            ("responses", "Response", "Add examples to illustrate expected response format"),
        ):
            for name, holder in components(document, section).items():
                if is_reference(holder) or not isinstance(holder, dict) or "content" not in holder:
                    continue
                if not _content_has_example(holder):
                    issues.add(
                        f"components/{section}", None, name,
                        f'{label} "{name}" lacks examples',
                        "medium",
                        suggestion,
                    )

        for name, param in components(document, "parameters").items():
            if is_reference(param) or not isinstance(param, dict):
                continue
            if _parameter_lacks_example(param):
                issues.add(
                    "components/parameters", None, name,
                    f'Required parameter "{name}" lacks examples',
                    "low",
                    "Add an example to help consumers understand expected parameter values",
                )
