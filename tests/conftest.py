from pathlib import Path

import pytest
import yaml

FIXTURES = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> dict:
    return yaml.safe_load((FIXTURES / name).read_text(encoding="utf-8"))


def make_document(paths=None, components=None, **extra) -> dict:
    """A bare OpenAPI 3 document; top-level keys can be added through ``extra``."""
    document = {
        "openapi": "3.0.3",
        "info": {"title": "Test API", "version": "1.0.0"},
        "paths": paths or {},
    }
    if components is not None:
        document["components"] = components
    document.update(extra)
    return document


@pytest.fixture
def petstore() -> dict:
    return load_fixture("petstore.yaml")


@pytest.fixture
def minimal() -> dict:
    return load_fixture("minimal.yaml")


@pytest.fixture
def poor() -> dict:
    return load_fixture("poor.yaml")
