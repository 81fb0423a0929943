"""Miscellaneous Best Practices: metadata conventions and component reuse."""

import re

from openapi_scorer.analyzers.base import IssueCollector
from openapi_scorer.document import (
    REUSABLE_COMPONENTS,
    as_list,
    as_mapping,
    components,
    is_reference,
    iter_operations,
    media_types,
    walk_schema,
)
from openapi_scorer.scoring.config import BEST_PRACTICES
from openapi_scorer.scoring.models import CriterionResult

SEMVER = re.compile(r"^\d+\.\d+\.\d+$")

# More inline definitions than this is reported as a reuse opportunity.
INLINE_DEFINITION_LIMIT = 10


class _ReferenceCounter:
    """Reference and inline-definition tallies for one document."""

    def __init__(self, document: dict):
        self.refs: dict[str, int] = {
            f"#/components/{section}/{name}": 0
            for section in REUSABLE_COMPONENTS
            for name in components(document, section)
        }
        self.inline = 0

    def reference(self, ref) -> None:
        if ref in self.refs:
            self.refs[ref] += 1

    def definitions(self, items) -> None:
        """Parameters: count each reference or inline definition."""
        for item in as_list(items):
            if not isinstance(item, dict):
                continue
            if is_reference(item):
                self.reference(item["$ref"])
                continue
            self.inline += 1
            self.schema(item.get("schema"))

    def content_holder(self, holder) -> None:
        """A request body or response."""
        if not isinstance(holder, dict):
            return
        if is_reference(holder):
            self.reference(holder["$ref"])
            return
        self.inline += 1
        for _, media in media_types(holder):
            self.schema(media.get("schema"))

    def schema(self, schema) -> None:
        def visit(node, location, depth):
            for child in self._direct_refs(node):
                self.reference(child)

        if is_reference(schema):
            self.reference(schema["$ref"])
        walk_schema(schema, "", visit)

    @staticmethod
    def _direct_refs(node: dict):
        children = list(as_mapping(node.get("properties")).values())
        children.append(node.get("items"))
        for keyword in ("allOf", "oneOf", "anyOf"):
            children.extend(as_list(node.get(keyword)))
        return [child["$ref"] for child in children if is_reference(child)]

    @property
    def unused(self) -> list[str]:
        return [ref for ref, count in self.refs.items() if count == 0]


class BestPracticesAnalyzer:
    criterion = BEST_PRACTICES

    def analyze(self, document: dict) -> CriterionResult:
        issues = IssueCollector(self.criterion)
        self._check_info(issues, as_mapping(document.get("info")))
        self._check_servers(issues, document.get("servers"))
        self._check_tags(issues, document)
        if document.get("components") and document.get("paths"):
            self._check_component_reuse(issues, document)
        return issues.result(10)

    def _check_info(self, issues, info):
        version = info.get("version")
        if not version:
            issues.add(
                "info", None, "version",
                "API version is not specified",
                "high",
                "Add a version following semantic versioning (e.g., 1.0.0)",
            )
        elif not SEMVER.match(str(version)):
            issues.add(
                "info", None, "version",
                f'API version "{version}" does not follow semantic versioning',
                "low",
                "Use semantic versioning (MAJOR.MINOR.PATCH) for the API version",
            )

        license_info = info.get("license")
        if not license_info:
            issues.add(
                "info", None, "license",
                "License information is missing",
                "low",
                "Add license information to help API consumers understand usage terms",
            )
        elif not as_mapping(license_info).get("name"):
            issues.add("info", None, "license.name", "License name is missing", "low", "Specify the license name")

        if not info.get("termsOfService"):
            issues.add(
                "info", None, "termsOfService",
                "Terms of service URL is missing",
                "low",
                "Add a terms of service URL to help API consumers understand usage terms",
            )

    def _check_servers(self, issues, servers):
        servers = as_list(servers)
        if not servers:
            issues.add(
                "root", None, "servers",
                "No servers defined in the API",
                "medium",
                "Add at least one server URL to help consumers understand where the API is deployed",
            )
            return
        for index, server in enumerate(servers):
            server = as_mapping(server)
            if not server.get("url"):
                issues.add("servers", None, f"[{index}]", "Server URL is missing", "medium", "Add a valid URL for the server")
            elif not server.get("description"):
                issues.add(
                    "servers", None, f"[{index}]",
                    "Server description is missing",
                    "low",
                    "Add a description to help consumers understand the server purpose (e.g., production, staging)",
                )

    def _check_tags(self, issues, document):
        tags = as_list(document.get("tags"))
        if not tags:
            issues.add(
                "root", None, "tags",
                "No tags defined in the API",
                "medium",
                "Define tags to group operations by resources or functionality",
            )
        for index, tag in enumerate(tags):
            tag = as_mapping(tag)
            if not tag.get("description"):
                issues.add(
                    "tags", None, f"[{index}]",
                    f'Tag "{tag.get("name", "")}" has no description',
                    "low",
                    "Add a description to explain the tag purpose",
                )

        untagged = sum(1 for _, _, operation in iter_operations(document) if not as_list(operation.get("tags")))
        if untagged:
            issues.add(
                "paths", None, "operations",
                f"{untagged} operations are not tagged",
                "medium",
                "Add tags to all operations for better organization",
            )

    def _check_component_reuse(self, issues, document):
        counter = _ReferenceCounter(document)

        for path_item in as_mapping(document.get("paths")).values():
            if isinstance(path_item, dict):
                counter.definitions(path_item.get("parameters"))
        for _, _, operation in iter_operations(document):
            counter.definitions(operation.get("parameters"))
            if operation.get("requestBody"):
                counter.content_holder(operation["requestBody"])
            for response in as_mapping(operation.get("responses")).values():
                counter.content_holder(response)

        unused = counter.unused
        if unused:
            issues.add(
                "components", None, "",
                f"{len(unused)} component definitions are unused",
                "low",
                "Remove unused component definitions or ensure they are referenced properly",
            )
        if counter.inline > INLINE_DEFINITION_LIMIT:
            issues.add(
                "paths", None, "",
                f"Found {counter.inline} inline schemas that could be reused",
                "medium",
                "Move common schemas to components/schemas for better reusability",
            )
