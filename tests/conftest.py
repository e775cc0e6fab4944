"""Shared test fixtures and configuration."""

import logging
import os
from pathlib import Path
import sys

import pytest


REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = REPO_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))


# Test environment that overrides every config value the package reads
TEST_ENV = {
    "DEFAULT_FIELDS": "name,mainfile,lastversion,description,homepage,github,author,versions,assets",
    "INTERNAL_ID_FIELD": "$loki",
    "ETAGS_COLLECTION": "etags",
    "LOG_LEVEL": "info",
    "LOG_JSON": "true",
    "OTLP_ENABLED": "false",
    "OTLP_PROTOCOL": "grpc",
    "OTLP_ENDPOINT": "http://localhost:4317",
    "OTLP_TIMEOUT_SECONDS": "10",
}


for key, value in TEST_ENV.items():
    os.environ[key] = value

# Imported after the environment is pinned
from catalog_api.adapters.collection import EtagEntry, InMemoryCollection, InMemoryEtagStore
from catalog_api.domain.model import Library
from catalog_api.service_layer.dispatcher import ApiResponse, RequestDispatcher


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Reset configuration environment variables before each test."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)


def make_library(name: str, asset_files: dict[str, list[str]] | None = None, /, **extra) -> Library:
    """Build a validated library; ``asset_files`` maps version -> files."""
    payload = {"name": name, **extra}
    if asset_files is not None:
        payload["assets"] = [{"version": version, "files": files} for version, files in asset_files.items()]
    return Library.model_validate(payload)


@pytest.fixture
def library_factory():
    return make_library


@pytest.fixture
def jquery():
    return make_library(
        "jquery",
        {"1.0.0": ["jquery.js", "jquery.min.js"], "2.1.4": ["jquery.min.js", "jquery.min.map"]},
        mainfile="jquery.min.js",
        lastversion="2.1.4",
        description="JavaScript library for DOM operations",
        homepage="http://jquery.com",
        github="https://github.com/jquery/jquery",
        author="jQuery Foundation",
        versions=["2.1.4", "1.0.0"],
        **{"$loki": 1},
    )


@pytest.fixture
def libraries(jquery):
    """A small catalog in storage order."""
    return [
        make_library("jquery-ui", {"1.11.4": ["jquery-ui.min.js"]}, author="jQuery Foundation", **{"$loki": 2}),
        jquery,
        make_library("bootstrap", {"3.3.5": ["css/bootstrap.min.css", "js/bootstrap.min.js"]}, **{"$loki": 3}),
        make_library("jquery.cookie", {"1.4.1": ["jquery.cookie.js"]}, author="Klaus Hartl", **{"$loki": 4}),
    ]


@pytest.fixture
def collection(libraries):
    return InMemoryCollection("jsdelivr", libraries)


@pytest.fixture
def etag_store():
    return InMemoryEtagStore(
        {
            "jsdelivr": [
                EtagEntry(path="jquery", etag='W/"jquery-etag"'),
                EtagEntry(path="bootstrap", etag='W/"bootstrap-etag"'),
            ]
        }
    )


@pytest.fixture
def dispatcher(etag_store):
    return RequestDispatcher(etag_store=etag_store)


class CallbackRecorder:
    """Captures ``callback(error, result)`` invocations."""

    def __init__(self):
        self.calls: list[tuple] = []

    def __call__(self, error, result):
        self.calls.append((error, result))

    @property
    def error(self):
        assert len(self.calls) == 1, f"callback called {len(self.calls)} times"
        return self.calls[0][0]

    @property
    def result(self) -> ApiResponse:
        assert len(self.calls) == 1, f"callback called {len(self.calls)} times"
        return self.calls[0][1]


@pytest.fixture
def recorder():
    return CallbackRecorder()


@pytest.fixture
def restore_root_logger():
    """Put back the root logger handlers replaced by ``configure_logging``."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
