"""Shared test fixtures and configuration."""

import sys
from pathlib import Path

# Add kube_validator/ to Python path so `from kubevalidator.xxx` imports work
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "kube_validator"))

import httpx
import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"
SCHEMAS_DIR = FIXTURES_DIR / "schemas"
MANIFESTS_DIR = FIXTURES_DIR / "manifests"


def schema_handler(request: httpx.Request) -> httpx.Response:
    """Serve fixture schemas by file name, whatever the version directory."""
    name = request.url.path.rsplit("/", 1)[-1]
    path = SCHEMAS_DIR / name
    if not path.exists():
        return httpx.Response(404, text="404: Not Found")
    return httpx.Response(200, content=path.read_bytes())


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def manifests_dir() -> Path:
    return MANIFESTS_DIR


@pytest.fixture
def schema_transport() -> httpx.MockTransport:
    return httpx.MockTransport(schema_handler)


@pytest.fixture
def manifest_bytes():
    def _load(name: str) -> bytes:
        return (MANIFESTS_DIR / name).read_bytes()

    return _load
