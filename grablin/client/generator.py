"""Generation orchestrator.

Turns a validated :class:`ProjectDescription` plus run options into a single
``POST /api/generate`` call and maps the answer to a
:data:`GenerationOutcome`. Request-level problems (missing token, bad
options, HTTP errors, network failures) come back as
:class:`GenerationFailure` values; :meth:`Generator.generate` does not raise
for them. Generation calls are never retried.

Typical usage::

    generator = Generator(CredentialResolver())
    outcome = await generator.generate(
        GenerateOptions(config=config, output="./my-app")
    )
    if outcome.success:
        print(outcome.output_path)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import httpx
from pydantic import BaseModel, Field

from grablin.auth import AuthError, CredentialResolver
from grablin.config import DEFAULT_API_URL
from grablin.schema.models import (
    GenerationFailure,
    GenerationOutcome,
    GenerationSuccess,
    OutputMode,
    ProjectDescription,
)

from .archive import ArchiveError, extract_archive
from .base import ApiClient

logger = logging.getLogger(__name__)


class GenerateOptions(BaseModel):
    """Inputs for one generation run."""

    config: ProjectDescription
    api_url: Optional[str] = Field(default=None, description="Overrides the client's API URL")
    output: Optional[str] = Field(default=None, description="Local directory to extract into")
    push_to_github: bool = Field(default=False)
    repo_name: Optional[str] = Field(default=None, description="Defaults to the project name")
    private: bool = Field(default=False)
    verbose: bool = Field(default=False)

    @property
    def output_mode(self) -> OutputMode:
        return OutputMode.GITHUB if self.push_to_github else OutputMode.LOCAL


def build_request_body(options: GenerateOptions) -> dict[str, Any]:
    """Compose the JSON body for ``POST /api/generate``.

    Sections: ``project`` (name, domain, owner, description), ``modules`` (in
    description order) and ``output`` (``"local"`` or ``"github"``). GitHub
    pushes also carry ``repoName`` and ``private``.
    """
    config = options.config
    body: dict[str, Any] = {
        "project": {
            "name": config.project_name,
            "domain": config.domain,
            "owner": config.owner,
            "description": config.description,
        },
        "modules": [module.to_request() for module in config.module_list()],
        "output": options.output_mode.value,
    }
    if options.output_mode is OutputMode.GITHUB:
        body["repoName"] = options.repo_name or str(config.project_name or "").lower()
        body["private"] = options.private
    return body


def _is_json(response: httpx.Response) -> bool:
    return "application/json" in response.headers.get("content-type", "").lower()


class Generator(ApiClient):
    """Drives a generation run against the Grablin API.

    Args:
        credentials: Source of the GitHub bearer token.
        api_url: Default API base URL, overridable per run.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport (tests use ``httpx.MockTransport``).
    """

    def __init__(
        self,
        credentials: CredentialResolver | None = None,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 120,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(api_url=api_url, timeout=timeout, transport=transport)
        self.credentials = credentials or CredentialResolver()

    async def generate(self, options: GenerateOptions) -> GenerationOutcome:
        """Run one generation.

        Returns:
            ``GenerationSuccess`` with either ``output_path`` (local mode) or
            ``repo_url`` (GitHub mode) set, or ``GenerationFailure``.
        """
        try:
            auth_header = self.credentials.build_auth_header()
        except AuthError as exc:
            return GenerationFailure(error=str(exc))

        if not options.output and not options.push_to_github:
            return GenerationFailure(error="No output option specified")

        url = self._url("/api/generate", options.api_url)
        body = build_request_body(options)
        if options.verbose:
            logger.debug(
                "POST %s (output=%s, %d module(s))", url, body["output"], len(body["modules"])
            )

        headers = {**auth_header, "Content-Type": "application/json"}

        try:
            async with self._client() as client:
                response = await client.post(url, json=body, headers=headers)

            if not response.is_success:
                return GenerationFailure(
                    error=f"API error ({response.status_code}): {response.text}"
                )

            if not _is_json(response):
                return self._handle_archive(response.content, options)

            return self._handle_json(response.json(), options)
        except ArchiveError as exc:
            return GenerationFailure(error=str(exc))
        except Exception as exc:  # noqa: BLE001
            logger.debug("Generation request failed", exc_info=True)
            return GenerationFailure(error=str(exc))

    # ------------------------------------------------------------------
    # Response handling
    # ------------------------------------------------------------------

    @staticmethod
    def _handle_archive(payload: bytes, options: GenerateOptions) -> GenerationOutcome:
        if options.output_mode is not OutputMode.LOCAL or not options.output:
            return GenerationFailure(error="Unexpected archive response for a GitHub push")

        output_path = Path(options.output).resolve()
        file_count = extract_archive(payload, output_path)
        logger.debug("Extracted %d file(s) to %s", file_count, output_path)
        return GenerationSuccess(file_count=file_count, output_path=str(output_path))

    @staticmethod
    def _handle_json(payload: Any, options: GenerateOptions) -> GenerationOutcome:
        if not isinstance(payload, dict):
            return GenerationFailure(error="Unexpected response from API")

        data = payload.get("data") or {}
        if not payload.get("success"):
            error = payload.get("error") or data.get("error") or "Unknown error"
            return GenerationFailure(error=str(error))

        file_count = int(data.get("fileCount") or 0)
        if options.output_mode is OutputMode.GITHUB:
            repo_url = data.get("repoUrl")
            if not repo_url:
                return GenerationFailure(error="API response missing repoUrl")
            clone_command = data.get("cloneCommand") or f"git clone {repo_url}"
            return GenerationSuccess(
                file_count=file_count,
                repo_url=repo_url,
                clone_command=clone_command,
            )

        return GenerationSuccess(
            file_count=file_count,
            output_path=str(Path(options.output or ".").resolve()),
        )
