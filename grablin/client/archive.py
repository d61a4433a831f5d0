"""Extraction of generated-project archives.

The generation service answers local-mode requests with a zip archive. Its
layout is opaque to the CLI: every regular file is written below the output
directory as-is. Entries that would land outside that directory are refused.
"""

from __future__ import annotations

import io
import zipfile
from pathlib import Path


class ArchiveError(Exception):
    """Raised when a generation payload cannot be extracted."""


def _safe_target(root: Path, member: str) -> Path:
    target = (root / member).resolve()
    if target != root and root not in target.parents:
        raise ArchiveError(f"Archive entry escapes output directory: {member}")
    return target


def extract_archive(payload: bytes, output_dir: str | Path) -> int:
    """Extract a zip *payload* into *output_dir*.

    Args:
        payload: Raw archive bytes.
        output_dir: Destination directory, created if missing.

    Returns:
        Number of files written (directories are not counted).

    Raises:
        ArchiveError: If the payload is not a zip archive or contains an
            entry outside *output_dir*.
    """
    root = Path(output_dir).resolve()

    try:
        archive = zipfile.ZipFile(io.BytesIO(payload))
    except zipfile.BadZipFile as exc:
        raise ArchiveError(f"Invalid archive received from API: {exc}") from exc

    with archive:
        members = archive.infolist()
        # Validate every entry before touching the filesystem.
        targets = [(info, _safe_target(root, info.filename)) for info in members]

        root.mkdir(parents=True, exist_ok=True)
        file_count = 0
        for info, target in targets:
            if info.is_dir():
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            with archive.open(info) as source:
                target.write_bytes(source.read())
            file_count += 1

    return file_count
