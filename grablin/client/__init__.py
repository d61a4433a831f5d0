"""Grablin API clients.

``Generator`` sends a project description to ``/api/generate`` and maps the
answer to a success or failure outcome; ``ModuleCatalog`` lists what the API
can generate.

Quick usage::

    from grablin.client import GenerateOptions, Generator, ModuleCatalog

    outcome = await Generator().generate(GenerateOptions(config=config, output="./app"))
    catalog = await ModuleCatalog().list_modules()
"""

from grablin.client.archive import ArchiveError, extract_archive
from grablin.client.catalog import KIND_TITLES, ModuleCatalog, group_by_kind, kind_for_filter
from grablin.client.generator import GenerateOptions, Generator, build_request_body

__all__ = [
    "KIND_TITLES",
    "ArchiveError",
    "GenerateOptions",
    "Generator",
    "ModuleCatalog",
    "build_request_body",
    "extract_archive",
    "group_by_kind",
    "kind_for_filter",
]
