"""Descriptions & Documentation: presence and length of description text."""

from openapi_scorer.analyzers.base import IssueCollector
from openapi_scorer.document import (
    as_list,
    as_mapping,
    components,
    description_length,
    is_reference,
    iter_operations,
)
from openapi_scorer.scoring.config import DESCRIPTIONS
from openapi_scorer.scoring.models import CriterionResult

# Minimum stripped description length per surface.
MIN_INFO = 20
MIN_PATH = 10
MIN_OPERATION = 15
MIN_PARAMETER = 5
MIN_PROPERTY = 5
MIN_REQUEST_BODY = 10
MIN_RESPONSE = 10
MIN_SCHEMA = 10


def _missing_or_short(node: dict) -> str:
    return "a short" if as_mapping(node).get("description") else "no"


class DescriptionsAnalyzer:
    criterion = DESCRIPTIONS

    def analyze(self, document: dict) -> CriterionResult:
        issues = IssueCollector(self.criterion)
        self._check_info(issues, as_mapping(document.get("info")))
        self._check_paths(issues, document)
        self._check_components(issues, document)
        return issues.result(self._count_checkable(document))

    def _count_checkable(self, document: dict) -> int:
        count = 1 + len(as_mapping(document.get("paths")))
        for _, _, operation in iter_operations(document):
            count += 1 + len(as_list(operation.get("parameters")))
            count += 1 if operation.get("requestBody") else 0
            count += len(as_mapping(operation.get("responses")))
        for section in ("schemas", "parameters", "requestBodies", "responses"):
            count += len(components(document, section))
        return count

    def _check_info(self, issues, info):
        if description_length(info) < MIN_INFO:
            issues.add(
                "info", None, "description",
                "API description is missing or too short",
                "high",
                f"Add a detailed description (at least {MIN_INFO} characters) explaining the purpose of the API",
            )
        if not info.get("contact"):
            issues.add(
                "info", None, "contact",
                "API contact information is missing",
                "medium",
                "Add contact information to help API consumers reach out for support",
            )

    def _check_paths(self, issues, document):
        for path, path_item in as_mapping(document.get("paths")).items():
            if not isinstance(path_item, dict):
                continue
            if path_item.get("summary") and description_length(path_item) < MIN_PATH:
                issues.add(
                    path, None, "description",
                    "Path has a summary but missing or short description",
                    "low",
                    "Add a more detailed description for the path",
                )

        for path, method, operation in iter_operations(document):
            self._check_operation(issues, path, method, operation)

    def _check_operation(self, issues, path, method, operation):
        if description_length(operation) < MIN_OPERATION:
            issues.add(
                path, method, "description",
                f"Operation {method.upper()} {path} has {_missing_or_short(operation)} description",
                "medium" if operation.get("summary") else "high",
                "Add a detailed description explaining what the operation does, expected behavior, and side effects",
            )

        for index, param in enumerate(as_list(operation.get("parameters"))):
            if is_reference(param) or not isinstance(param, dict):
                continue
            if description_length(param) < MIN_PARAMETER:
                name = param.get("name", "")
                issues.add(
                    path, method, f"parameters[{index}] ({name} in {param.get('in', '')})",
                    f'Parameter "{name}" has {_missing_or_short(param)} description',
                    "medium",
                    "Add a clear description explaining the parameter purpose, constraints, and format",
                )

        request_body = operation.get("requestBody")
        if isinstance(request_body, dict) and not is_reference(request_body):
            if description_length(request_body) < MIN_REQUEST_BODY:
                issues.add(
                    path, method, "requestBody",
                    f"Request body has {_missing_or_short(request_body)} description",
                    "medium",
                    "Add a detailed description explaining the expected payload",
                )

        for status, response in as_mapping(operation.get("responses")).items():
            if is_reference(response) or not isinstance(response, dict):
                continue
            if description_length(response) < MIN_RESPONSE:
                issues.add(
                    path, method, f"responses.{status}",
                    f"Response for status code {status} has {_missing_or_short(response)} description",
                    "high" if str(status).startswith("2") else "medium",
                    "Add a clear description explaining the meaning of this status code in context",
                )

    def _check_components(self, issues, document):
        for name, schema in components(document, "schemas").items():
            if is_reference(schema) or not isinstance(schema, dict):
                continue
            if description_length(schema) < MIN_SCHEMA:
                issues.add(
                    "components/schemas", None, name,
                    f'Schema "{name}" has {_missing_or_short(schema)} description',
                    "medium",
                    "Add a detailed description explaining what this schema represents",
                )
            for prop_name, prop in as_mapping(schema.get("properties")).items():
                if is_reference(prop) or not isinstance(prop, dict):
                    continue
                if description_length(prop) < MIN_PROPERTY:
                    issues.add(
                        "components/schemas", None, f"{name}.properties.{prop_name}",
                        f'Property "{prop_name}" in schema "{name}" has {_missing_or_short(prop)} description',
                        "low",
                        "Add a description explaining what this property represents",
                    )

        sections = (
            ("parameters", "Parameter", MIN_PARAMETER, "Add a clear description explaining the parameter purpose"),
            ("requestBodies", "Request body", MIN_REQUEST_BODY, "Add a detailed description explaining the expected payload"),
            ("responses", "Response", MIN_RESPONSE, "Add a clear description explaining this response"),
        )
        for section, label, minimum, suggestion in sections:
            for name, component in components(document, section).items():
                if is_reference(component) or not isinstance(component, dict):
                    continue
                if description_length(component) < minimum:
                    issues.add(
                        f"components/{section}", None, name,
                        f'{label} "{name}" has {_missing_or_short(component)} description',
                        "medium",
                        suggestion,
                    )
