"""Outer-shape models for a loaded OpenAPI 3 document.

Only the fields every analyzer relies on are declared; everything else in the
document passes through untouched. Full validation against the OpenAPI schema
happens afterwards in the loader.
"""

from pydantic import BaseModel, ConfigDict, field_validator

SUPPORTED_VERSIONS = ("3.0.", "3.1.")


class Info(BaseModel):
    """The ``info`` block."""

    model_config = ConfigDict(extra="allow")

    title: str
    version: str
    description: str | None = None


class OpenApiDocument(BaseModel):
    """Top level of an OpenAPI 3.x document."""

    model_config = ConfigDict(extra="allow")

    openapi: str
    info: Info
    paths: dict = {}
    components: dict = {}
    servers: list[dict] = []
    tags: list[dict] = []
    security: list[dict] = []

    @field_validator("openapi", mode="before")
    @classmethod
    def _openapi_3(cls, value):
        if not str(value).startswith(SUPPORTED_VERSIONS):
            raise ValueError(f"unsupported OpenAPI version {value!r}, expected 3.0.x or 3.1.x")
        return str(value)

    @property
    def endpoint_count(self) -> int:
        return len(self.paths)
