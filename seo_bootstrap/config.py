"""SEO bootstrap configuration.

Centralised, typed settings for a single pipeline run. All settings use
Pydantic v2 models so they can be validated at construction time and
serialised to/from JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from seo_bootstrap.models import Strategy


DEFAULT_DOMAIN = "https://example.com"


class Settings(BaseModel):
    """Inputs and tuning knobs for one transformation run.

    Instances are typically created once by the CLI entry point (or by the
    HTTP layer that wraps it) and then passed through the rest of the
    pipeline.  ``domain`` is interpolated literally into generated files;
    validating it is the caller's responsibility.
    """

    domain: str = Field(default=DEFAULT_DOMAIN, description="Base URL of the deployed site")
    strategy: Strategy = Field(default=Strategy.REACT)
    build: bool = Field(default=False, description="Run npm install + npm run build")
    build_timeout: int = Field(
        default=900, ge=30, description="Timeout in seconds for each npm command"
    )
    npm_command: str = Field(
        default_factory=lambda: "npm.cmd" if sys.platform == "win32" else "npm"
    )
    output_suffix: str = Field(default="-seo-ssg", description="Appended to the output archive stem")
    workdir_prefix: str = Field(default="vite-seo-bootstrap-zip-")
    rewrite_build_config: bool = Field(
        default=True,
        description="Overwrite the Vite config with the recommended SEO configuration",
    )

    @field_validator("strategy", mode="before")
    @classmethod
    def _coerce_strategy(cls, value: Any) -> Strategy:
        return Strategy.parse(value)

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def base_url(self) -> str:
        """The domain without a trailing slash."""
        return self.domain.rstrip("/")

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the settings to a JSON file and return its path."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Settings":
        """Load previously-saved settings from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls, **overrides: Any) -> "Settings":
        """Build ``Settings`` from environment variables.

        Recognised variables (all optional):
            SEO_BOOTSTRAP_DOMAIN, SEO_BOOTSTRAP_STRATEGY, SEO_BOOTSTRAP_BUILD,
            SEO_BOOTSTRAP_BUILD_TIMEOUT, SEO_BOOTSTRAP_NPM,
            SEO_BOOTSTRAP_REWRITE_CONFIG.

        Keyword arguments that are not ``None`` take precedence over the
        environment.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("SEO_BOOTSTRAP_DOMAIN"):
            kwargs["domain"] = os.environ["SEO_BOOTSTRAP_DOMAIN"]
        if os.environ.get("SEO_BOOTSTRAP_STRATEGY"):
            kwargs["strategy"] = os.environ["SEO_BOOTSTRAP_STRATEGY"]
        if os.environ.get("SEO_BOOTSTRAP_BUILD"):
            kwargs["build"] = _truthy(os.environ["SEO_BOOTSTRAP_BUILD"])
        if os.environ.get("SEO_BOOTSTRAP_BUILD_TIMEOUT"):
            kwargs["build_timeout"] = int(os.environ["SEO_BOOTSTRAP_BUILD_TIMEOUT"])
        if os.environ.get("SEO_BOOTSTRAP_NPM"):
            kwargs["npm_command"] = os.environ["SEO_BOOTSTRAP_NPM"]
        if os.environ.get("SEO_BOOTSTRAP_REWRITE_CONFIG"):
            kwargs["rewrite_build_config"] = _truthy(os.environ["SEO_BOOTSTRAP_REWRITE_CONFIG"])

        kwargs.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**kwargs)


def _truthy(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}
