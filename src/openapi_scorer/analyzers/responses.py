"""Response Codes: status-code coverage per operation."""

from itertools import combinations

from openapi_scorer.analyzers.base import IssueCollector
from openapi_scorer.document import as_mapping, is_item_path, is_reference, iter_operations, media_types
from openapi_scorer.scoring.config import RESPONSE_CODES
from openapi_scorer.scoring.models import CriterionResult


class ResponseCodesAnalyzer:
    criterion = RESPONSE_CODES

    def analyze(self, document: dict) -> CriterionResult:
        issues = IssueCollector(self.criterion)
        count = 0
        for path, method, operation in iter_operations(document):
            count += 1
            self._check_operation(issues, path, method, operation)
        return issues.result(count)

    def _check_operation(self, issues, path, method, operation):
        responses = {str(code): response for code, response in as_mapping(operation.get("responses")).items()}
        if not responses:
            issues.add(
                path, method, "responses",
                "Operation has no defined responses",
                "critical",
                "Define at least success (2xx) and error (4xx/5xx) responses",
            )
            return

        codes = list(responses)
        if not any(code.startswith("2") or code == "default" for code in codes):
            issues.add(
                path, method, "responses",
                "Operation is missing success response codes (2xx)",
                "high",
                "Add appropriate success response codes (e.g., 200, 201, 204)",
            )
        if not any(code.startswith("4") for code in codes):
            issues.add(
                path, method, "responses",
                "Operation is missing client error response codes (4xx)",
                "medium",
                "Add appropriate client error response codes (e.g., 400, 401, 404)",
            )
        if not any(code.startswith("5") for code in codes) and "default" not in codes:
            issues.add(
                path, method, "responses",
                "Operation is missing server error handling (5xx or default)",
                "low",
                "Add server error responses (5xx) or a default response",
            )

        self._check_method_codes(issues, path, method, codes)
        self._check_success_consistency(issues, path, method, responses)

    def _check_method_codes(self, issues, path, method, codes):
        if method == "post" and not is_item_path(path) and "201" not in codes:
            issues.add(
                path, method, "responses",
                "POST operation for resource creation should return 201 Created",
                "medium",
                "Add a 201 Created response for resource creation operations",
            )
        elif method in ("put", "patch") and "200" not in codes and "204" not in codes:
            issues.add(
                path, method, "responses",
                f"{method.upper()} operation should return 200 OK or 204 No Content",
                "medium",
                "Add appropriate success response code (200 or 204) based on whether content is returned",
            )
        elif method == "delete" and "204" not in codes:
            issues.add(
                path, method, "responses",
                "DELETE operation should typically return 204 No Content",
                "low",
                "Consider using 204 No Content for DELETE operations",
            )
        elif method == "get" and is_item_path(path) and "404" not in codes:
            issues.add(
                path, method, "responses",
                "GET operation for a specific resource should handle 404 Not Found",
                "medium",
                "Add a 404 Not Found response for when the requested resource does not exist",
            )

    def _check_success_consistency(self, issues, path, method, responses):
        schemas: dict[str, dict] = {}
        for code, response in responses.items():
            if not code.startswith("2") or is_reference(response) or not isinstance(response, dict):
                continue
            for _, media in media_types(response):
                if isinstance(media.get("schema"), dict):
                    schemas[code] = media["schema"]

        for first, second in combinations(schemas, 2):
            # Both inline, or both pointing at the same component.
            if schemas[first].get("$ref") != schemas[second].get("$ref"):
                issues.add(
                    path, method, f"responses.{first} vs responses.{second}",
                    "Different success responses use inconsistent schema structures",
                    "medium",
                    "Use consistent schema structures across similar response codes",
                )
