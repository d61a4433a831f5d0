"""Persistence for ``grablin.json`` project descriptions.

The store owns the on-disk representation: camelCase JSON, UTF-8, two-space
indent, trailing newline, and a ``version`` stamp. Loading distinguishes a
missing file (``None``) from a malformed one (:class:`ConfigParseError`);
business-rule problems are left to :func:`grablin.schema.validate`.
"""

from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from grablin.config import DEFAULT_CONFIG_FILE
from grablin.schema.models import ProjectDescription

SCHEMA_VERSION = "1.0"


class ConfigParseError(Exception):
    """Raised when ``grablin.json`` exists but cannot be parsed."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Failed to parse config file: {reason}")


class ConfigStore:
    """Reads and writes project descriptions.

    Relative paths are resolved against *base_dir* (the current working
    directory when not given) at call time.
    """

    def __init__(
        self,
        default_file: str = DEFAULT_CONFIG_FILE,
        base_dir: str | Path | None = None,
    ) -> None:
        self.default_file = default_file
        self.base_dir = Path(base_dir) if base_dir is not None else None

    def resolve_path(self, path: str | None = None) -> str:
        """Return *path* unchanged, or the default file name when absent."""
        return path or self.default_file

    def _absolute(self, path: str | Path | None) -> Path:
        target = Path(self.resolve_path(str(path) if path else None))
        if not target.is_absolute() and self.base_dir is not None:
            target = self.base_dir / target
        return target.resolve()

    def exists(self, path: str | Path | None = None) -> bool:
        """Return ``True`` if the resolved config file is present."""
        return self._absolute(path).exists()

    def load(self, path: str | Path | None = None) -> ProjectDescription | None:
        """Load a project description.

        Args:
            path: File to read. Defaults to ``grablin.json``.

        Returns:
            The parsed description, or ``None`` if the file does not exist.

        Raises:
            ConfigParseError: If the file is not valid JSON or its top level is
                not an object. Wrongly typed fields are left to the validator.
        """
        target = self._absolute(path)
        if not target.exists():
            return None

        try:
            raw = target.read_text(encoding="utf-8")
            data = json.loads(raw)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ConfigParseError(target, str(exc)) from exc

        if not isinstance(data, dict):
            raise ConfigParseError(target, f"expected a JSON object, got {type(data).__name__}")

        return ProjectDescription.model_validate(data)

    def save(
        self,
        config: ProjectDescription | Mapping[str, Any],
        path: str | Path | None = None,
    ) -> Path:
        """Persist a project description, overwriting any existing file.

        A ``version`` of ``"1.0"`` is added when the description has none;
        an existing ``version`` is kept. The file is written to a temporary
        sibling first and then moved into place.

        Returns:
            The absolute path written.
        """
        target = self._absolute(path)
        if isinstance(config, ProjectDescription):
            document = config.to_document()
        else:
            document = {k: v for k, v in config.items() if v is not None}
        document = {"version": SCHEMA_VERSION, **document}

        content = json.dumps(document, indent=2, ensure_ascii=False) + "\n"

        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", dir=target.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(content)
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        return target


_default_store = ConfigStore()


def resolve_path(path: str | None = None) -> str:
    """Module-level shortcut for :meth:`ConfigStore.resolve_path`."""
    return _default_store.resolve_path(path)


def load(path: str | Path | None = None) -> ProjectDescription | None:
    """Module-level shortcut for :meth:`ConfigStore.load`."""
    return _default_store.load(path)


def save(config: ProjectDescription | Mapping[str, Any], path: str | Path | None = None) -> Path:
    """Module-level shortcut for :meth:`ConfigStore.save`."""
    return _default_store.save(config, path)
