"""React static site generation strategy.

Runs in three stages:

1. SEO bootstrap -- metadata component, sitemap helper, robots.txt, Vite
   config, guide, and dotfiles, plus the SEO-oriented dependencies.
2. SSG wiring -- ``vite-react-ssg`` scripts, a routes file built from the
   detected routes, a headless-safe entry point, and the ``index.html``
   script tag pointed at it.
3. Config cleanup -- the ``viteSSG`` plugin call, superseded by
   ``vite-react-ssg``, is removed from the Vite config.
"""

from __future__ import annotations

from seo_bootstrap.analyzer import detect_mount_element_id
from seo_bootstrap.models import (
    OverwritePolicy,
    SkipReason,
    StepOutcome,
    Strategy,
    TransformationPlan,
)
from seo_bootstrap.transform import (
    ensure_module_type,
    ensure_script,
    locate_config,
    merge_dependencies,
    merge_scripts,
    remove_import_lines,
    remove_invocation,
)
from seo_bootstrap.transform.html import point_entry_script, read_html_entry, rewrite_html_entry
from seo_bootstrap.utils import console, print_step

from .base import BaseStrategy, StrategyContext


SEO_DEPENDENCIES: dict[str, str] = {
    "react-helmet-async": "^2.0.0",
    "vite-plugin-html": "^3.2.1",
    "vite-plugin-sitemap": "^0.7.1",
    "vite-ssg": "^0.24.0",
}

# vite-bundle-visualizer only publishes 1.2.x; a newer range breaks npm install.
SEO_DEV_DEPENDENCIES: dict[str, str] = {
    "vite-bundle-visualizer": "^1.2.1",
    "@vitejs/plugin-react": "^4.2.1",
    "vite": "^5.0.0",
}

SSG_DEPENDENCIES: dict[str, str] = {
    "react-router-dom": "^6.19.0",
}

SSG_DEV_DEPENDENCIES: dict[str, str] = {
    "vite-react-ssg": "^0.8.9",
}

SSG_ENTRY = "src/main.ssg.jsx"

_RE_VITE_SSG_IMPORT = r"^import\s+\{[^}]*\bviteSSG\b[^}]*}\s+from[^\n]*\n?"


class ReactSsgStrategy(BaseStrategy):
    """SEO bootstrap plus static generation through ``vite-react-ssg``."""

    strategy = Strategy.REACT

    async def steps(self, ctx: StrategyContext, plan: TransformationPlan) -> None:
        await self.seo_bootstrap(ctx, plan)
        await self.ssg_wiring(ctx, plan)
        plan.record(self.remove_vite_ssg_plugin(ctx))

    # -- Stage 1 -----------------------------------------------------------

    async def seo_bootstrap(self, ctx: StrategyContext, plan: TransformationPlan) -> None:
        manifest = ctx.project.manifest
        changed = merge_dependencies(manifest, SEO_DEPENDENCIES, SEO_DEV_DEPENDENCIES)
        changed = ensure_script(manifest, "analyze", "npx vite-bundle-visualizer") or changed
        plan.record(self.persist_manifest(ctx, "seo dependencies", changed))

        template_ctx = ctx.template_context()
        for template, target in (
            ("react/Seo.tsx.j2", "src/components/Seo.tsx"),
            ("react/sitemap.ts.j2", "src/seo/sitemap.ts"),
            ("react/robots.txt.j2", "public/robots.txt"),
        ):
            plan.record(await ctx.emitter.emit(template, target, template_ctx))

        plan.record(await self.write_build_config(ctx))
        plan.record(await ctx.emitter.emit("react/SEO_GUIDE.md.j2", "SEO_GUIDE.md", template_ctx))
        plan.extend(await self.ensure_dotfiles(ctx))

    async def write_build_config(self, ctx: StrategyContext) -> StepOutcome:
        """Replace the Vite config with the recommended SEO configuration.

        Writes to the existing ``vite.config.ts`` when there is one, else to
        ``vite.config.js``.
        """
        step = "write vite config"
        if not ctx.settings.rewrite_build_config:
            return StepOutcome.skipped(step, SkipReason.NO_CHANGES, "disabled by settings")
        existing = locate_config(ctx.project.root)
        target = existing.name if existing is not None else "vite.config.js"
        return await ctx.emitter.emit("react/vite.config.j2", target, ctx.template_context())

    # -- Stage 2 -----------------------------------------------------------

    async def ssg_wiring(self, ctx: StrategyContext, plan: TransformationPlan) -> None:
        manifest = ctx.project.manifest
        changed = merge_dependencies(manifest, SSG_DEPENDENCIES, SSG_DEV_DEPENDENCIES)
        changed = merge_scripts(manifest, "build", "vite", "vite-react-ssg") or changed
        changed = merge_scripts(
            manifest, "dev", "vite", "vite-react-ssg", default="vite-react-ssg dev"
        ) or changed
        changed = ensure_module_type(manifest) or changed
        plan.record(self.persist_manifest(ctx, "ssg dependencies", changed))

        plan.record(
            await ctx.emitter.emit("react/routes.jsx.j2", "src/routes.jsx", ctx.template_context())
        )

        mount_id = detect_mount_element_id(read_html_entry(ctx.project.root))
        console.print(f"[dim]·[/dim] Root container ID: \"{mount_id}\"")
        plan.record(
            await ctx.emitter.emit(
                "react/main.ssg.jsx.j2",
                SSG_ENTRY,
                ctx.template_context(mount_id=mount_id),
                policy=OverwritePolicy.ALWAYS_OVERWRITE,
            )
        )

        plan.record(
            rewrite_html_entry(
                ctx.project.root,
                "point index.html at ssg entry",
                lambda html: point_entry_script(html, f"/{SSG_ENTRY}"),
            )
        )

    # -- Stage 3 -----------------------------------------------------------

    def remove_vite_ssg_plugin(self, ctx: StrategyContext) -> StepOutcome:
        outcome = ctx.rewriter.apply(
            "remove viteSSG plugin",
            lambda text: remove_import_lines(text, _RE_VITE_SSG_IMPORT),
            lambda text: remove_invocation(text, "viteSSG"),
        )
        if outcome.was_applied:
            print_step("Cleaned viteSSG from the Vite config")
        return outcome
