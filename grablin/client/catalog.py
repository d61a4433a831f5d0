"""Module catalog client.

Fetches the modules, extensions, providers and VCS integrations the Grablin
API can generate, for ``grablin list``. Like the generator, it returns a
result object instead of raising on HTTP or network problems.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from grablin.schema.models import CatalogEntry, CatalogResult

from .base import ApiClient

logger = logging.getLogger(__name__)

# Display order for grouped listings.
KIND_ORDER: tuple[str, ...] = ("code", "extension", "provider", "vcs", "unknown")

KIND_TITLES: dict[str, str] = {
    "code": "Code Modules (Frontend/Backend)",
    "extension": "Extensions",
    "provider": "Cloud Providers",
    "vcs": "Version Control",
    "unknown": "Other",
}

_FILTER_ALIASES: dict[str, str] = {
    "modules": "code",
    "code": "code",
    "extensions": "extension",
    "extension": "extension",
    "providers": "provider",
    "provider": "provider",
    "vcs": "vcs",
}


def kind_for_filter(name: str) -> str | None:
    """Map a user-facing filter word (``extensions``, ``providers``...) to a kind."""
    return _FILTER_ALIASES.get(name.strip().lower())


def group_by_kind(entries: list[CatalogEntry]) -> dict[str, list[CatalogEntry]]:
    """Group entries by kind, in :data:`KIND_ORDER`, keeping entry order.

    Kinds outside the known set are collected under ``"unknown"``.
    """
    groups: dict[str, list[CatalogEntry]] = {}
    for entry in entries:
        kind = entry.kind if entry.kind in KIND_ORDER else "unknown"
        groups.setdefault(kind, []).append(entry)
    return {kind: groups[kind] for kind in KIND_ORDER if kind in groups}


class ModuleCatalog(ApiClient):
    """Reads ``GET /api/modules``."""

    async def list_modules(self, api_url: str | None = None) -> CatalogResult:
        """Fetch the catalog.

        Args:
            api_url: Overrides the client's API base URL for this call.

        Returns:
            A ``CatalogResult`` with entries in API order, or an error.
        """
        url = self._url("/api/modules", api_url)
        try:
            async with self._client() as client:
                response = await client.get(url)

            if not response.is_success:
                return CatalogResult(success=False, error=f"API error ({response.status_code})")

            payload = response.json()
            if not isinstance(payload, dict):
                return CatalogResult(success=False, error="Unexpected response from API")
            if payload.get("success") is False:
                return CatalogResult(success=False, error=str(payload.get("error") or "Unknown error"))
            data = payload.get("data") or {}
            raw_modules = data.get("modules") or []
            modules = [CatalogEntry.model_validate(item) for item in raw_modules]
            return CatalogResult(success=True, modules=modules)
        except ValidationError as exc:
            return CatalogResult(success=False, error=f"Invalid catalog entry: {exc}")
        except Exception as exc:  # noqa: BLE001
            logger.debug("Catalog request failed", exc_info=True)
            return CatalogResult(success=False, error=str(exc))
