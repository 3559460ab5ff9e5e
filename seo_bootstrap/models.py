"""Pydantic v2 models shared by every stage of the SEO bootstrap pipeline.

Defines the project manifest, the analysed project descriptor, generated
artifacts with their overwrite policy, and the step outcomes that make up a
transformation plan.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator


MANIFEST_NAME = "package.json"


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Strategy(str, Enum):
    """Generation pipeline variant. Exactly one is selected per run."""
    REACT = "react"
    PREACT = "preact"

    @classmethod
    def parse(cls, value: str | Strategy | None) -> Strategy:
        """Return the matching strategy, falling back to ``REACT``.

        Unknown or empty values never raise; they silently select the
        default React pipeline.
        """
        if isinstance(value, Strategy):
            return value
        normalized = (value or "").strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        return cls.REACT


class OverwritePolicy(str, Enum):
    """Ownership of a generated file once it exists on disk."""
    CREATE_IF_ABSENT = "create_if_absent"
    ALWAYS_OVERWRITE = "always_overwrite"


class StepStatus(str, Enum):
    APPLIED = "applied"
    SKIPPED = "skipped"


class SkipReason(str, Enum):
    """Why an optional step did not change anything."""
    CONFIG_FILE_ABSENT = "config_file_absent"
    HTML_ENTRY_ABSENT = "html_entry_absent"
    IMPORT_ABSENT = "import_absent"
    INVOCATION_ABSENT = "invocation_absent"
    ALREADY_PRESENT = "already_present"
    NO_CHANGES = "no_changes"
    ROUTE_SCAN_SKIPPED = "route_scan_skipped"
    FILE_UNREADABLE = "file_unreadable"


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------

class Manifest(BaseModel):
    """Parsed ``package.json``.

    Only the three mappings the pipeline merges into and the module-type
    marker are modelled explicitly; every other top-level key is kept as an
    extra field and written back untouched, in its original position.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    dependencies: dict[str, Any] = Field(default_factory=dict)
    dev_dependencies: dict[str, Any] = Field(default_factory=dict, alias="devDependencies")
    scripts: dict[str, Any] = Field(default_factory=dict)
    module_type: Optional[str] = Field(default=None, alias="type")

    _key_order: list[str] = PrivateAttr(default_factory=list)
    _dirty: bool = PrivateAttr(default=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Manifest:
        """Build a manifest from raw JSON data, remembering key order."""
        cleaned = {
            key: (value if value is not None else {})
            if key in ("dependencies", "devDependencies", "scripts")
            else value
            for key, value in data.items()
        }
        manifest = cls.model_validate(cleaned)
        manifest._key_order = list(data.keys())
        return manifest

    @property
    def dirty(self) -> bool:
        """True once any merge has mutated this manifest."""
        return self._dirty

    def mark_dirty(self) -> None:
        self._dirty = True

    def mark_clean(self) -> None:
        self._dirty = False

    @property
    def package_name(self) -> str:
        extra = self.model_extra or {}
        return str(extra.get("name") or "")

    def declares(self, package: str) -> bool:
        """Return True if *package* appears in either dependency mapping."""
        return package in self.dependencies or package in self.dev_dependencies

    def to_dict(self) -> dict[str, Any]:
        """Serialise back to ``package.json`` shape.

        Keys present in the source file keep their position; keys introduced
        by the pipeline are appended at the end.
        """
        data = self.model_dump(by_alias=True)
        if self.module_type is None and "type" not in self._key_order:
            data.pop("type", None)
        ordered: dict[str, Any] = {}
        for key in self._key_order:
            if key in data:
                ordered[key] = data.pop(key)
        for key in ("dependencies", "devDependencies", "scripts"):
            if key in data and not data[key]:
                # Do not introduce empty mappings the source never had.
                data.pop(key)
        ordered.update(data)
        return ordered


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------

class ProjectDescriptor(BaseModel):
    """Result of analysing a project tree before transformation."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    root: Path = Field(..., description="Absolute project root")
    manifest: Manifest
    routes: list[str] = Field(default_factory=lambda: ["/"], description="Detected RouteSet")
    has_components_dir: bool = Field(default=False)

    @field_validator("routes")
    @classmethod
    def _normalize_routes(cls, value: list[str]) -> list[str]:
        return sorted(set(value) | {"/"})


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------

class GeneratedArtifact(BaseModel):
    """A file the pipeline writes into the project tree."""

    path: str = Field(..., description="Path relative to the project root")
    content: str
    policy: OverwritePolicy = Field(default=OverwritePolicy.ALWAYS_OVERWRITE)


class StepOutcome(BaseModel):
    """What happened when a single transformation step ran."""

    step: str
    status: StepStatus = Field(default=StepStatus.APPLIED)
    reason: Optional[SkipReason] = Field(default=None)
    detail: str = Field(default="")

    @classmethod
    def applied(cls, step: str, detail: str = "") -> StepOutcome:
        return cls(step=step, status=StepStatus.APPLIED, detail=detail)

    @classmethod
    def skipped(cls, step: str, reason: SkipReason, detail: str = "") -> StepOutcome:
        return cls(step=step, status=StepStatus.SKIPPED, reason=reason, detail=detail)

    @property
    def was_applied(self) -> bool:
        return self.status is StepStatus.APPLIED


class TransformationPlan(BaseModel):
    """Ordered step outcomes produced by one strategy run."""

    strategy: Strategy
    steps: list[StepOutcome] = Field(default_factory=list)

    def record(self, outcome: StepOutcome) -> StepOutcome:
        self.steps.append(outcome)
        return outcome

    def extend(self, outcomes: list[StepOutcome]) -> None:
        self.steps.extend(outcomes)

    @property
    def applied_steps(self) -> list[str]:
        return [s.step for s in self.steps if s.was_applied]

    @property
    def skipped_steps(self) -> list[str]:
        return [s.step for s in self.steps if not s.was_applied]
