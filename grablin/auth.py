"""GitHub credential resolution and identity lookup.

The token is read from ``GITHUB_TOKEN`` (preferred) or ``GH_TOKEN``. The
environment is injected as a mapping so tests never need to touch
``os.environ``.

Only :meth:`CredentialResolver.resolve_token` and
:meth:`CredentialResolver.build_auth_header` raise (:class:`AuthError`).
Everything else answers "no" instead of raising, so callers asking "am I
authenticated?" never need exception handling.

Typical usage::

    resolver = CredentialResolver()
    if resolver.has_credential():
        user = await resolver.fetch_identity()
        print(user.login if user else "invalid token")
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

import httpx
from pydantic import ValidationError

from grablin.config import IdentityRetryConfig
from grablin.retry import RetryCancelledError, with_retry
from grablin.schema.models import Identity

logger = logging.getLogger(__name__)

PRIMARY_TOKEN_VAR = "GITHUB_TOKEN"
SECONDARY_TOKEN_VAR = "GH_TOKEN"
TOKEN_URL = "https://github.com/settings/tokens"
IDENTITY_URL = "https://api.github.com/user"
GITHUB_API_VERSION = "2022-11-28"


class AuthError(Exception):
    """Raised when no GitHub token is configured."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message
            or (
                f"GitHub token required. Set {PRIMARY_TOKEN_VAR} or {SECONDARY_TOKEN_VAR} "
                f"environment variable.\nCreate a token at: {TOKEN_URL}"
            )
        )


def _is_transient(outcome: Any) -> bool:
    """Retry on 5xx responses and on transport failures (DNS, connect, timeout)."""
    if isinstance(outcome, httpx.Response):
        return outcome.status_code >= 500
    return isinstance(outcome, httpx.TransportError)


class CredentialResolver:
    """Resolves the GitHub token and looks up the authenticated user.

    Args:
        environ: Environment mapping to read tokens from. Defaults to
            ``os.environ``, read at call time.
        retry: Retry budget for :meth:`fetch_identity`.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport (tests use ``httpx.MockTransport``).
        sleep: Awaitable sleep used between identity retries.
    """

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        retry: IdentityRetryConfig | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._environ = environ
        self.retry = retry or IdentityRetryConfig()
        self.timeout = timeout
        self.transport = transport
        self._sleep = sleep

    @property
    def environ(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    # ------------------------------------------------------------------
    # Token
    # ------------------------------------------------------------------

    def _lookup(self) -> str:
        # Empty strings count as unset, so an empty primary falls through.
        return self.environ.get(PRIMARY_TOKEN_VAR) or self.environ.get(SECONDARY_TOKEN_VAR) or ""

    def resolve_token(self) -> str:
        """Return the GitHub token.

        Raises:
            AuthError: If neither variable holds a non-empty value.
        """
        token = self._lookup()
        if not token:
            raise AuthError()
        return token

    def has_credential(self) -> bool:
        """Return ``True`` if a non-empty token is available. Never raises."""
        return bool(self._lookup())

    def build_auth_header(self) -> dict[str, str]:
        """Return ``{"Authorization": "Bearer <token>"}``.

        Raises:
            AuthError: If no token is configured.
        """
        return {"Authorization": f"Bearer {self.resolve_token()}"}

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            transport=self.transport,
        )

    async def fetch_identity(self, cancel: asyncio.Event | None = None) -> Identity | None:
        """Return the authenticated GitHub user, or ``None``.

        No request is made when no token is configured. A 4xx answer means
        the token is bad and is not retried. 5xx answers and transport
        errors are retried with exponential backoff up to
        ``retry.max_attempts`` total attempts.

        Args:
            cancel: Optional event; setting it abandons the retry sequence.

        Returns:
            The identity on a 2xx response, ``None`` in every other case.
        """
        if not self.has_credential():
            return None

        headers = {
            **self.build_auth_header(),
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }

        async def attempt() -> httpx.Response:
            async with self._client() as client:
                return await client.get(IDENTITY_URL, headers=headers)

        try:
            response = await with_retry(
                attempt,
                max_attempts=self.retry.max_attempts,
                base_delay=self.retry.base_delay,
                is_retryable=_is_transient,
                sleep=self._sleep,
                cancel=cancel,
            )
        except RetryCancelledError as exc:
            logger.debug("Identity lookup cancelled: %s", exc)
            return None
        except httpx.HTTPError as exc:
            logger.debug("Identity lookup failed: %s", exc)
            return None

        if not response.is_success:
            logger.debug("Identity lookup returned HTTP %d", response.status_code)
            return None

        try:
            return Identity.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            logger.debug("Unparseable identity payload: %s", exc)
            return None
