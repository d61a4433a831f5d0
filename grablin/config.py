"""Grablin CLI configuration.

Centralised, typed runtime settings for the CLI. All settings use Pydantic v2
models so they are validated at construction time and can be overridden from
environment variables without boiler-plate.

These are *tool* settings (where the API lives, how long to wait, how hard to
retry). The user's project description lives in ``grablin.json`` and is
handled by :mod:`grablin.store`.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field

DEFAULT_API_URL = "https://api.grablin.com"
DEFAULT_CONFIG_FILE = "grablin.json"


class IdentityRetryConfig(BaseModel):
    """Retry budget for GitHub identity lookups."""

    max_attempts: int = Field(default=3, ge=1, description="Total attempts, including the first")
    base_delay: float = Field(
        default=1.0, ge=0.0, description="Backoff unit in seconds (doubled per attempt)"
    )


class Config(BaseModel):
    """Global Grablin CLI configuration.

    Instances are created once by the CLI entry point (usually through
    :meth:`from_env`) and then used to construct the API clients.
    """

    api_url: str = Field(default=DEFAULT_API_URL)
    config_file: str = Field(default=DEFAULT_CONFIG_FILE)
    timeout: int = Field(default=120, ge=5, description="Per-request timeout in seconds")
    identity: IdentityRetryConfig = Field(default_factory=IdentityRetryConfig)

    @property
    def normalized_api_url(self) -> str:
        """The API base URL without a trailing slash."""
        return self.api_url.rstrip("/")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            GRABLIN_API_URL, GRABLIN_CONFIG, GRABLIN_TIMEOUT,
            GRABLIN_IDENTITY_ATTEMPTS, GRABLIN_IDENTITY_BASE_DELAY.

        Args:
            environ: Mapping to read from. Defaults to ``os.environ``.
        """
        env = os.environ if environ is None else environ

        identity_kwargs: dict[str, Any] = {}
        if env.get("GRABLIN_IDENTITY_ATTEMPTS"):
            identity_kwargs["max_attempts"] = int(env["GRABLIN_IDENTITY_ATTEMPTS"])
        if env.get("GRABLIN_IDENTITY_BASE_DELAY"):
            identity_kwargs["base_delay"] = float(env["GRABLIN_IDENTITY_BASE_DELAY"])

        kwargs: dict[str, Any] = {}
        if env.get("GRABLIN_API_URL"):
            kwargs["api_url"] = env["GRABLIN_API_URL"]
        if env.get("GRABLIN_CONFIG"):
            kwargs["config_file"] = env["GRABLIN_CONFIG"]
        if env.get("GRABLIN_TIMEOUT"):
            kwargs["timeout"] = int(env["GRABLIN_TIMEOUT"])

        return cls(identity=IdentityRetryConfig(**identity_kwargs), **kwargs)
