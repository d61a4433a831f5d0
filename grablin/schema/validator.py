"""Business-rule validation for project descriptions.

``validate`` is a pure function: it never mutates its input and never raises
for a malformed description. Every rule violation becomes a plain string in
``ValidationResult.errors`` (blocking) or ``ValidationResult.warnings``
(advisory). Messages embed the field path (``modules[2].moduleId``) and the
word "required" where a value is missing so callers can match on substrings.

Rules run in a fixed order so that error ordering is deterministic:
projectName, domain, owner, modules (then each module), environments.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel

from .models import MODULE_KINDS, ModuleKind, ProjectDescription, ValidationResult

# ---------------------------------------------------------------------------
# Grammars
# ---------------------------------------------------------------------------

PROJECT_NAME_RE = re.compile(r"[a-zA-Z][a-zA-Z0-9_-]{0,99}")

# Labels: alphanumeric ends, hyphens inside, at most 63 chars; 2-24 letter TLD.
DOMAIN_RE = re.compile(
    r"(?:[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?\.)+[a-z]{2,24}",
    re.IGNORECASE,
)

EMAIL_RE = re.compile(
    r"[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*"
)

MODULE_ID_RE = re.compile(r"[a-z][a-z0-9-]{0,99}")

MAX_DOMAIN_LENGTH = 253
MAX_LABEL_LENGTH = 63
MAX_EMAIL_LENGTH = 254

_KIND_LIST = ", ".join(MODULE_KINDS)


def _matches(pattern: re.Pattern[str], value: Any) -> bool:
    return isinstance(value, str) and pattern.fullmatch(value) is not None


def _as_mapping(value: Any) -> Mapping[str, Any]:
    """Normalise a model or mapping to a camelCase mapping; anything else is empty."""
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True)
    if isinstance(value, Mapping):
        return value
    return {}


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


# ---------------------------------------------------------------------------
# Field rules
# ---------------------------------------------------------------------------


def _validate_project_name(value: Any) -> list[str]:
    if not value:
        return ["projectName is required"]
    if not _matches(PROJECT_NAME_RE, value):
        return [
            "projectName must start with a letter, contain only letters, numbers, "
            "hyphens, and underscores, and be 1-100 chars"
        ]
    return []


def _validate_domain(value: Any) -> list[str]:
    if not value:
        return ["domain is required"]

    # Independent checks: one domain can trip several of them.
    errors: list[str] = []
    text = str(value)
    if not _matches(DOMAIN_RE, value):
        errors.append("domain must be a valid domain name (e.g., myapp.com, api.myapp.io)")
    if len(text) > MAX_DOMAIN_LENGTH:
        errors.append(f"domain name too long (max {MAX_DOMAIN_LENGTH} characters)")
    if any(len(label) > MAX_LABEL_LENGTH for label in text.split(".")):
        errors.append(f"domain label too long (max {MAX_LABEL_LENGTH} characters per label)")
    return errors


def _validate_owner(value: Any) -> list[str]:
    if not value:
        return ["owner email is required"]

    errors: list[str] = []
    if not _matches(EMAIL_RE, value):
        errors.append("owner must be a valid email address")
    if len(str(value)) > MAX_EMAIL_LENGTH:
        errors.append(f"email address too long (max {MAX_EMAIL_LENGTH} characters)")
    return errors


def validate_module(module: Any, index: int) -> list[str]:
    """Validate one module entry.

    Args:
        module: A ``ModuleDescription`` or raw mapping. Anything else is
            treated as a module with no fields set.
        index: Position in the ``modules`` sequence, used in the field path.

    Returns:
        Error strings prefixed with ``modules[<index>]``; empty when valid.
    """
    data = _as_mapping(module)
    prefix = f"modules[{index}]"
    errors: list[str] = []

    kind = data.get("kind")
    if not kind:
        errors.append(f"{prefix}.kind is required ({_KIND_LIST})")
    elif kind not in MODULE_KINDS:
        errors.append(f"{prefix}.kind must be one of: {_KIND_LIST}")

    if not data.get("type"):
        errors.append(f"{prefix}.type is required")

    module_id = data.get("moduleId")
    if not module_id:
        errors.append(f"{prefix}.moduleId is required")
    else:
        if not _matches(MODULE_ID_RE, module_id):
            errors.append(
                f"{prefix}.moduleId must be lowercase, start with a letter, "
                "use hyphens only, and be 1-100 chars"
            )
        text = str(module_id)
        if text.endswith("-") or "--" in text:
            errors.append(f"{prefix}.moduleId cannot end with hyphen or contain consecutive hyphens")

    return errors


def _duplicate_module_ids(modules: Sequence[Any]) -> list[str]:
    """Advisory warnings for repeated ``moduleId`` values."""
    warnings: list[str] = []
    first_seen: dict[str, int] = {}
    for index, module in enumerate(modules):
        module_id = _as_mapping(module).get("moduleId")
        if not isinstance(module_id, str) or not module_id:
            continue
        if module_id in first_seen:
            warnings.append(
                f"modules[{index}].moduleId '{module_id}' duplicates "
                f"modules[{first_seen[module_id]}]"
            )
        else:
            first_seen[module_id] = index
    return warnings


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate(config: ProjectDescription | Mapping[str, Any]) -> ValidationResult:
    """Validate a project description.

    Args:
        config: A ``ProjectDescription`` or a raw camelCase mapping as read
            from ``grablin.json``.

    Returns:
        A ``ValidationResult``; ``valid`` is ``True`` iff no errors were found.
    """
    data = _as_mapping(config)
    errors: list[str] = []
    warnings: list[str] = []

    errors.extend(_validate_project_name(data.get("projectName")))
    errors.extend(_validate_domain(data.get("domain")))
    errors.extend(_validate_owner(data.get("owner")))

    modules = data.get("modules")
    if modules is None or not _is_sequence(modules):
        errors.append("modules array is required")
    elif len(modules) == 0:
        warnings.append("No modules specified - project will be empty")
    else:
        for index, module in enumerate(modules):
            errors.extend(validate_module(module, index))

        if not any(_as_mapping(m).get("kind") == ModuleKind.CODE.value for m in modules):
            warnings.append("No code modules (frontend/backend) specified")

        warnings.extend(_duplicate_module_ids(modules))

    environments = data.get("environments")
    if environments is None or not _is_sequence(environments):
        warnings.append("No environments specified, using defaults (dev, staging, prod)")

    return ValidationResult(valid=not errors, errors=errors, warnings=warnings)
