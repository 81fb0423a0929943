"""Schema & Types: structural soundness of every inline schema."""

from openapi_scorer.analyzers.base import IssueCollector
from openapi_scorer.document import (
    COMPOSITION_KEYWORDS,
    MAX_SCHEMA_DEPTH,
    as_list,
    as_mapping,
    components,
    is_reference,
    iter_operations,
    media_types,
    walk_schema,
)
from openapi_scorer.scoring.config import SCHEMA_AND_TYPES
from openapi_scorer.scoring.models import CriterionResult


def _has_type(schema: dict, name: str) -> bool:
    declared = schema.get("type")
    if isinstance(declared, list):
        return name in declared
    return declared == name


def _is_composed(schema: dict) -> bool:
    return any(schema.get(keyword) for keyword in COMPOSITION_KEYWORDS)


class SchemaAndTypesAnalyzer:
    criterion = SCHEMA_AND_TYPES

    def analyze(self, document: dict) -> CriterionResult:
        issues = IssueCollector(self.criterion)

        for name, schema in components(document, "schemas").items():
            self._check_tree(issues, schema, "components/schemas", None, f"components/schemas/{name}", root_severity="high")

        for section in ("requestBodies", "responses"):
            for name, holder in components(document, section).items():
                self._check_content(issues, holder, f"components/{section}", None, name)
        for name, param in components(document, "parameters").items():
            self._check_parameter(issues, param, "components/parameters", None, name)

        for path, path_item in as_mapping(document.get("paths")).items():
            if not isinstance(path_item, dict):
                continue
            for index, param in enumerate(as_list(path_item.get("parameters"))):
                self._check_parameter(issues, param, path, None, f"parameters[{index}]")

        for path, method, operation in iter_operations(document):
            request_body = operation.get("requestBody")
            if request_body:
                self._check_content(issues, request_body, path, method, "requestBody")
            for status, response in as_mapping(operation.get("responses")).items():
                self._check_content(issues, response, path, method, f"responses.{status}")
            for index, param in enumerate(as_list(operation.get("parameters"))):
                self._check_parameter(issues, param, path, method, f"parameters[{index}]")

        return issues.result(self._count_checkable(document))

    def _count_checkable(self, document: dict) -> int:
        count = len(components(document, "schemas"))
        for _, _, operation in iter_operations(document):
            if operation.get("requestBody"):
                count += 1
            count += len(as_mapping(operation.get("responses")))
        return count

    def _check_content(self, issues, holder, path, operation, location):
        if is_reference(holder) or not isinstance(holder, dict):
            return
        for media_type, media in media_types(holder):
            media_location = f"{location}.content.{media_type}"
            if "schema" not in media:
                issues.add(
                    path, operation, media_location,
                    f"{self._subject(path, operation, location)} ({media_type}) does not have a schema",
                    "high",
                    "Define a schema for the content",
                )
                continue
            self._check_tree(issues, media["schema"], path, operation, f"{media_location}.schema")

    def _check_parameter(self, issues, param, path, operation, location):
        if is_reference(param) or not isinstance(param, dict):
            return
        name = param.get("name", "")
        if "schema" not in param and "content" not in param:
            issues.add(
                path, operation, location,
                f'Parameter "{name}" has neither schema nor content defined',
                "high",
                "Define either a schema or content for the parameter",
            )
        if "schema" in param:
            self._check_tree(issues, param["schema"], path, operation, f"{location}.schema")
        for media_type, media in media_types(param):
            if "schema" not in media:
                issues.add(
                    path, operation, f"{location}.content.{media_type}",
                    f'Parameter "{name}" content ({media_type}) does not have a schema',
                    "high",
                    "Define a schema for the parameter content",
                )
            else:
                self._check_tree(issues, media["schema"], path, operation, f"{location}.content.{media_type}.schema")

    @staticmethod
    def _subject(path, operation, location):
        if operation:
            return f"{location} for {operation.upper()} {path}"
        return f"{path}/{location}"

    def _check_tree(self, issues, schema, path, operation, location, root_severity="medium"):
        def visit(node, node_location, depth):
            self._check_node(issues, node, path, operation, node_location, root_severity if depth == 0 else "medium")

        cut = walk_schema(schema, location, visit)
        if cut is None:
            return
        kind, cut_location = cut
        if kind == "cycle":
            description = f'Schema at "{cut_location}" refers back to one of its own ancestors without a $ref'
            suggestion = "Extract the recursive part into components/schemas and point to it with $ref"
        else:
            description = f'Schema at "{cut_location}" exceeds the maximum nesting depth of {MAX_SCHEMA_DEPTH}'
            suggestion = "Flatten the schema or move nested parts into components/schemas"
        issues.add(path, operation, cut_location, description, "medium", suggestion)

    def _check_node(self, issues, schema, path, operation, location, severity):
        composed = _is_composed(schema)

        if not schema.get("type") and not composed:
            issues.add(
                path, operation, location,
                f'Schema at "{location}" is missing a type definition',
                severity,
                "Add a type property to the schema or use composition with $ref, allOf, oneOf, or anyOf",
            )

        if _has_type(schema, "array") and not schema.get("items"):
            issues.add(
                path, operation, location,
                f'Array schema at "{location}" does not define item type',
                severity,
                "Add an items property to define the type of array elements",
            )

        if (
            _has_type(schema, "object")
            and not schema.get("properties")
            and not schema.get("additionalProperties")
            and not composed
        ):
            issues.add(
                path, operation, location,
                f'Object schema at "{location}" has no properties defined',
                "medium",
                "Define properties for the object or use composition patterns",
            )

        if schema.get("additionalProperties") is True:
            issues.add(
                path, operation, location,
                f'Schema at "{location}" allows any additional properties without constraints',
                "medium",
                "Consider defining a schema for additionalProperties or setting it to false",
            )

        properties = schema.get("properties")
        if isinstance(properties, dict):
            for required in as_list(schema.get("required")):
                if isinstance(required, str) and required not in properties:
                    issues.add(
                        path, operation, f"{location}/required",
                        f'Schema at "{location}" requires property "{required}" that is not defined in properties',
                        "high",
                        "Ensure all required properties are defined in the properties object",
                    )
