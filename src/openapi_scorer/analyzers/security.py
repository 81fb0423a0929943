"""Security: security scheme completeness and per-operation coverage."""

from openapi_scorer.analyzers.base import IssueCollector
from openapi_scorer.document import WRITE_METHODS, as_mapping, components, is_reference, iter_operations
from openapi_scorer.scoring.config import SECURITY
from openapi_scorer.scoring.models import CriterionResult

SCHEMES_PATH = "components/securitySchemes"
VALID_SCHEME_TYPES = "apiKey, http, oauth2, openIdConnect"

# flow name -> (needs authorizationUrl, needs tokenUrl)
OAUTH2_FLOWS: dict[str, tuple[bool, bool]] = {
    "implicit": (True, False),
    "password": (False, True),
    "clientCredentials": (False, True),
    "authorizationCode": (True, True),
}


class SecurityAnalyzer:
    criterion = SECURITY

    def analyze(self, document: dict) -> CriterionResult:
        issues = IssueCollector(self.criterion)
        global_security = document.get("security")

        if not global_security:
            issues.add(
                "root", None, "security",
                "No global security requirements defined",
                "medium",
                "Define global security requirements to ensure all endpoints are secured by default",
            )

        schemes = components(document, "securitySchemes")
        for name, scheme in schemes.items():
            if is_reference(scheme) or not isinstance(scheme, dict):
                continue
            self._check_scheme(issues, name, scheme)

        count = 1 + len(schemes)
        for path, method, operation in iter_operations(document):
            count += 1
            self._check_operation(issues, path, method, operation, bool(global_security))

        return issues.result(count)

    def _check_scheme(self, issues, name, scheme):
        scheme_type = scheme.get("type")
        if not scheme_type:
            issues.add(
                SCHEMES_PATH, None, name,
                "Security scheme is missing a type",
                "high",
                f"Define a valid security scheme type ({VALID_SCHEME_TYPES})",
            )
            return

        if scheme_type == "apiKey":
            if not scheme.get("name"):
                issues.add(
                    SCHEMES_PATH, None, name,
                    'API key security scheme is missing the "name" property',
                    "high",
                    "Add the name property to specify the key name",
                )
            if not scheme.get("in"):
                issues.add(
                    SCHEMES_PATH, None, name,
                    'API key security scheme is missing the "in" property',
                    "high",
                    "Add the in property to specify where the key is located (header, query, cookie)",
                )
        elif scheme_type == "http":
            if not scheme.get("scheme"):
                issues.add(
                    SCHEMES_PATH, None, name,
                    'HTTP security scheme is missing the "scheme" property',
                    "high",
                    "Add the scheme property (e.g., basic, bearer, digest)",
                )
        elif scheme_type == "oauth2":
            flows = as_mapping(scheme.get("flows"))
            if not flows:
                issues.add(
                    SCHEMES_PATH, None, name,
                    "OAuth2 security scheme is missing flow definitions",
                    "high",
                    "Define at least one OAuth2 flow (implicit, password, clientCredentials, authorizationCode)",
                )
            for flow_name, (needs_auth_url, needs_token_url) in OAUTH2_FLOWS.items():
                flow = flows.get(flow_name)
                if flow:
                    self._check_flow(issues, name, flow_name, as_mapping(flow), needs_auth_url, needs_token_url)
        elif scheme_type == "openIdConnect":
            if not scheme.get("openIdConnectUrl"):
                issues.add(
                    SCHEMES_PATH, None, name,
                    'OpenID Connect security scheme is missing the "openIdConnectUrl" property',
                    "high",
                    "Add the openIdConnectUrl property pointing to the OpenID Connect configuration",
                )
        else:
            issues.add(
                SCHEMES_PATH, None, name,
                f'Invalid security scheme type: "{scheme_type}"',
                "high",
                f"Use a valid security scheme type ({VALID_SCHEME_TYPES})",
            )

    def _check_flow(self, issues, name, flow_name, flow, needs_auth_url, needs_token_url):
        location = f"{name}.flows.{flow_name}"
        if not as_mapping(flow.get("scopes")):
            issues.add(
                SCHEMES_PATH, None, location,
                f'OAuth2 flow "{flow_name}" is missing scopes',
                "high",
                "Define at least one scope for the OAuth2 flow",
            )
        if needs_auth_url and not flow.get("authorizationUrl"):
            issues.add(
                SCHEMES_PATH, None, location,
                f"OAuth2 {flow_name} flow is missing authorizationUrl",
                "high",
                "Add the authorizationUrl property",
            )
        if needs_token_url and not flow.get("tokenUrl"):
            issues.add(
                SCHEMES_PATH, None, location,
                f"OAuth2 {flow_name} flow is missing tokenUrl",
                "high",
                "Add the tokenUrl property",
            )

    def _check_operation(self, issues, path, method, operation, has_global_security):
        is_write = method in WRITE_METHODS
        severity = "high" if is_write else "medium"

        if "security" in operation and not operation["security"]:
            issues.add(
                path, method, "security",
                f"{method.upper()} operation explicitly disables security",
                severity,
                "Consider adding security requirements for write operations"
                if is_write
                else "Consider if this operation really should be publicly accessible",
            )
        elif "security" not in operation and not has_global_security:
            issues.add(
                path, method, "security",
                f"{method.upper()} operation has no security requirements",
                severity,
                "Add security requirements for write operations" if is_write else "Consider adding security requirements",
            )
