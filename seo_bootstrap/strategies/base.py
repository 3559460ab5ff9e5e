"""Shared plumbing for generation strategies."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from seo_bootstrap.config import Settings
from seo_bootstrap.models import (
    OverwritePolicy,
    ProjectDescriptor,
    SkipReason,
    StepOutcome,
    Strategy,
    TransformationPlan,
)
from seo_bootstrap.scaffolder import TemplateEmitter
from seo_bootstrap.transform import ConfigRewriter, save_manifest
from seo_bootstrap.utils import print_step


@dataclass
class StrategyContext:
    """Everything a strategy needs to transform one project."""

    project: ProjectDescriptor
    settings: Settings
    emitter: TemplateEmitter = field(init=False)
    rewriter: ConfigRewriter = field(init=False)

    def __post_init__(self) -> None:
        self.emitter = TemplateEmitter(self.project.root)
        self.rewriter = ConfigRewriter(self.project.root)

    def template_context(self, **extra: Any) -> dict[str, Any]:
        """Variables available to every template."""
        return {
            "domain": self.settings.domain,
            "base_url": self.settings.base_url,
            "project_name": self.project.manifest.package_name or "Your Vite App",
            "routes": self.project.routes,
            **extra,
        }


class BaseStrategy(ABC):
    """One generation pipeline variant.

    Subclasses implement :meth:`steps`, which runs their ordered steps and
    records every outcome on the plan.
    """

    strategy: Strategy

    async def run(self, ctx: StrategyContext) -> TransformationPlan:
        plan = TransformationPlan(strategy=self.strategy)
        await self.steps(ctx, plan)
        return plan

    @abstractmethod
    async def steps(self, ctx: StrategyContext, plan: TransformationPlan) -> None:
        """Run this strategy's steps in order, recording them on *plan*."""

    # -- Shared steps ------------------------------------------------------

    @staticmethod
    def persist_manifest(ctx: StrategyContext, step: str, changed: bool) -> StepOutcome:
        """Write package.json if *changed*; report the step either way."""
        if not changed:
            print_step("package.json already contains required dependencies")
            return StepOutcome.skipped(step, SkipReason.NO_CHANGES, "package.json")
        save_manifest(ctx.project.root, ctx.project.manifest)
        print_step(f"Updated package.json ({step})")
        return StepOutcome.applied(step, "package.json")

    @staticmethod
    async def ensure_dotfiles(ctx: StrategyContext) -> list[StepOutcome]:
        """Create ``.env`` and ``.gitignore`` unless the user already has them."""
        template_ctx = ctx.template_context()
        outcomes = []
        for template, target in (("shared/env.j2", ".env"), ("shared/gitignore.j2", ".gitignore")):
            outcomes.append(
                await ctx.emitter.emit(
                    template, target, template_ctx, policy=OverwritePolicy.CREATE_IF_ABSENT
                )
            )
        return outcomes
