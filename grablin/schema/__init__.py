"""Grablin project-description schema.

Models for ``grablin.json`` and the API payloads, plus the business-rule
validator that checks a description before it is sent for generation.

Usage::

    from grablin.schema import ProjectDescription, validate

    result = validate(ProjectDescription(projectName="my-app", ...))
    if not result.valid:
        print(result.errors)
"""

from grablin.schema.models import (
    MODULE_KINDS,
    CatalogEntry,
    CatalogResult,
    GenerationFailure,
    GenerationOutcome,
    GenerationSuccess,
    Identity,
    ModuleDescription,
    ModuleKind,
    OutputMode,
    ProjectDescription,
    ValidationResult,
)
from grablin.schema.validator import validate, validate_module

__all__ = [
    "MODULE_KINDS",
    "CatalogEntry",
    "CatalogResult",
    "GenerationFailure",
    "GenerationOutcome",
    "GenerationSuccess",
    "Identity",
    "ModuleDescription",
    "ModuleKind",
    "OutputMode",
    "ProjectDescription",
    "ValidationResult",
    "validate",
    "validate_module",
]
