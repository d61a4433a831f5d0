"""Shared pytest fixtures for the Grablin CLI test suite.

Provides reusable fixtures for:
- Valid and invalid project descriptions (raw documents and models)
- Injected environments with and without a GitHub token
- ``httpx.MockTransport`` factories that record outgoing requests
- In-memory zip archives standing in for generated projects
"""

from __future__ import annotations

import copy
import io
import zipfile
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from grablin.schema.models import ProjectDescription


# ---------------------------------------------------------------------------
# Project descriptions
# ---------------------------------------------------------------------------

VALID_DOCUMENT: dict[str, Any] = {
    "projectName": "test-app",
    "description": "A test application",
    "domain": "test.com",
    "owner": "test@example.com",
    "modules": [
        {
            "kind": "code",
            "type": "react",
            "moduleId": "frontend",
            "layers": ["frontend", "cicd"],
            "fieldValues": {},
        },
        {
            "kind": "code",
            "type": "drf",
            "moduleId": "api",
            "layers": ["backend", "cicd"],
        },
        {
            "kind": "extension",
            "type": "auth0",
            "moduleId": "auth0",
            "fieldValues": {"tenant": "acme"},
        },
    ],
    "environments": ["dev", "staging", "prod"],
}


@pytest.fixture
def valid_document() -> dict[str, Any]:
    """A fresh copy of a fully valid camelCase ``grablin.json`` document."""
    return copy.deepcopy(VALID_DOCUMENT)


@pytest.fixture
def valid_config(valid_document: dict[str, Any]) -> ProjectDescription:
    """The valid document parsed into a ``ProjectDescription``."""
    return ProjectDescription.model_validate(valid_document)


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------

@pytest.fixture
def token_env() -> dict[str, str]:
    """Environment mapping with a primary GitHub token."""
    return {"GITHUB_TOKEN": "ghp_testtoken"}


@pytest.fixture
def empty_env() -> dict[str, str]:
    """Environment mapping with no GitHub token at all."""
    return {}


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------

class RecordingTransport(httpx.MockTransport):
    """``MockTransport`` that remembers every request it served.

    *responses* is consumed in order; each item is an ``httpx.Response`` or
    an exception instance to raise. The last item repeats once exhausted.
    """

    def __init__(self, responses: list[httpx.Response | Exception]) -> None:
        self.requests: list[httpx.Request] = []
        self._responses = list(responses)
        super().__init__(self._serve)

    def _serve(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        item = self._responses.pop(0) if len(self._responses) > 1 else self._responses[0]
        if isinstance(item, Exception):
            raise item
        # Fresh copy per request; a Response is bound to one request.
        return httpx.Response(item.status_code, headers=item.headers, content=item.content)

    @property
    def call_count(self) -> int:
        return len(self.requests)


@pytest.fixture
def make_transport() -> Callable[..., RecordingTransport]:
    """Factory: ``make_transport(resp1, resp2, ...)`` -> ``RecordingTransport``."""

    def _make(*responses: httpx.Response | Exception) -> RecordingTransport:
        return RecordingTransport(list(responses))

    return _make


# ---------------------------------------------------------------------------
# Archives
# ---------------------------------------------------------------------------

def build_zip(files: dict[str, str], directories: tuple[str, ...] = ()) -> bytes:
    """Build an in-memory zip containing *files* (name -> text)."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for directory in directories:
            archive.writestr(zipfile.ZipInfo(directory.rstrip("/") + "/"), "")
        for name, content in files.items():
            archive.writestr(name, content)
    return buffer.getvalue()


@pytest.fixture
def project_zip() -> bytes:
    """A small generated-project archive with three files and one directory."""
    return build_zip(
        {
            "README.md": "# test-app\n",
            "frontend/package.json": '{"name": "frontend"}\n',
            "api/manage.py": "print('hello')\n",
        },
        directories=("docs/",),
    )


@pytest.fixture
def zip_builder() -> Callable[..., bytes]:
    """Expose :func:`build_zip` to tests that need custom archives."""
    return build_zip
