"""Pydantic v2 models for Grablin project descriptions and API payloads.

The persisted ``grablin.json`` document uses camelCase keys. Models expose
snake_case attributes with camelCase aliases and accept either spelling on
input. Description models are deliberately lenient: every field is optional
and keeps the raw JSON value, so a wrong type never fails parsing. All rules,
shape included, are checked by :mod:`grablin.schema.validator`, which reports
every problem at once instead of stopping at the first.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class ModuleKind(str, Enum):
    """Closed set of module categories."""
    CODE = "code"
    EXTENSION = "extension"
    PROVIDER = "provider"
    VCS = "vcs"


MODULE_KINDS: tuple[str, ...] = tuple(kind.value for kind in ModuleKind)


class OutputMode(str, Enum):
    """Where the generation service delivers the project."""
    LOCAL = "local"
    GITHUB = "github"


# ---------------------------------------------------------------------------
# Project description
# ---------------------------------------------------------------------------

class ModuleDescription(BaseModel):
    """One unit of generated functionality (framework, extension, provider, vcs).

    Fields hold whatever the JSON document contained; wrong types are
    reported by the validator, not rejected here.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    kind: Any = Field(default=None, description="One of code, extension, provider, vcs")
    type: Any = Field(default=None, description="Concrete implementation, e.g. 'react'")
    module_id: Any = Field(default=None, alias="moduleId")
    layers: Any = Field(default=None, description="Delivery layers: frontend, backend, cicd, ops")
    field_values: Any = Field(default=None, alias="fieldValues")

    def to_request(self) -> dict[str, Any]:
        """Serialise for the ``modules`` section of a generation request."""
        return {
            "kind": self.kind,
            "type": self.type,
            "moduleId": self.module_id,
            "layers": list(self.layers) if isinstance(self.layers, list) else [],
            "fieldValues": dict(self.field_values) if isinstance(self.field_values, dict) else {},
        }


# Mapping entries become ModuleDescription; anything else is kept raw.
ModuleEntry = Annotated[Union[ModuleDescription, Any], Field(union_mode="left_to_right")]


class ProjectDescription(BaseModel):
    """The declarative project description stored in ``grablin.json``.

    ``modules`` is a list of :class:`ModuleDescription` when the document has
    the expected shape. A non-list value, or a non-object element, is kept
    as-is so :func:`grablin.schema.validate` can report it.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    project_name: Any = Field(default=None, alias="projectName")
    description: Any = Field(default=None)
    domain: Any = Field(default=None)
    owner: Any = Field(default=None, description="Owner email address")
    modules: Annotated[
        Union[list[ModuleEntry], Any], Field(default=None, union_mode="left_to_right")
    ]
    environments: Any = Field(default=None)
    provider: Any = Field(default=None)
    vcs: Any = Field(default=None)
    version: Any = Field(default=None)

    def module_list(self) -> list[ModuleDescription]:
        """The well-formed modules, in document order."""
        if not isinstance(self.modules, list):
            return []
        return [m for m in self.modules if isinstance(m, ModuleDescription)]

    def to_document(self) -> dict[str, Any]:
        """Return the camelCase mapping written to disk (``None`` fields dropped)."""
        return self.model_dump(by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

class ValidationResult(BaseModel):
    """Outcome of :func:`grablin.schema.validator.validate`.

    ``valid`` is ``True`` iff ``errors`` is empty; warnings never gate it.
    """
    valid: bool = Field(default=True)
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Generation outcome
# ---------------------------------------------------------------------------

class GenerationSuccess(BaseModel):
    """A completed generation run.

    Exactly one of ``output_path`` (local mode) and ``repo_url`` (GitHub mode)
    is populated.
    """
    success: Literal[True] = True
    file_count: int = Field(default=0, ge=0)
    output_path: Optional[str] = Field(default=None)
    repo_url: Optional[str] = Field(default=None)
    clone_command: Optional[str] = Field(default=None)


class GenerationFailure(BaseModel):
    """A failed generation run; ``error`` is shown to the user as-is."""
    success: Literal[False] = False
    error: str


GenerationOutcome = Union[GenerationSuccess, GenerationFailure]


# ---------------------------------------------------------------------------
# Module catalog
# ---------------------------------------------------------------------------

class CatalogEntry(BaseModel):
    """A module offered by the generation service."""
    model_config = ConfigDict(extra="allow")

    id: str
    kind: str = Field(default="unknown")
    type: str = Field(default="")
    name: str = Field(default="")
    description: str = Field(default="")
    layers: list[str] = Field(default_factory=list)


class CatalogResult(BaseModel):
    """Result of a catalog listing call."""
    success: bool = Field(default=True)
    modules: list[CatalogEntry] = Field(default_factory=list)
    error: Optional[str] = Field(default=None)


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------

class Identity(BaseModel):
    """The authenticated GitHub user (subset of ``GET /user``)."""
    model_config = ConfigDict(extra="ignore")

    login: str
    id: int
    name: Optional[str] = None
    email: Optional[str] = None
