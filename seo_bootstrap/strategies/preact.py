"""Preact prerender strategy.

Switches the project's Vite plugin from React to ``@preact/preset-vite`` with
prerendering enabled, rewrites the source entry for client hydration plus a
``prerender`` export, and marks the ``index.html`` entry script as
prerenderable.  Intended for projects that currently use React; review the
result before shipping it.
"""

from __future__ import annotations

from seo_bootstrap.analyzer import detect_mount_element_id
from seo_bootstrap.models import Strategy, TransformationPlan
from seo_bootstrap.transform import (
    ensure_import,
    merge_dependencies,
    remove_import_lines,
    replace_invocation,
)
from seo_bootstrap.transform.html import mark_entry_prerender, read_html_entry, rewrite_html_entry

from .base import BaseStrategy, StrategyContext


PREACT_DEPENDENCIES: dict[str, str] = {
    "preact": "^10.17.1",
    "@preact/preset-vite": "^2.4.0",
    "preact-iso": "^3.1.0",
    "preact-render-to-string": "^5.2.6",
}

PREACT_PLUGIN_IMPORT = "import preact from '@preact/preset-vite';\n"
PREACT_PLUGIN_CALL = "preact({ prerender: { enabled: true } })"

_RE_REACT_PLUGIN_IMPORT = r"""import\s+react\s+from\s+['"]@vitejs/plugin-react[^'"]*['"];?\n"""
_RE_REACT_PLUGIN_CALL = r"\breact\(([^)]*)\)"
# Any import of a @vitejs/plugin-react* package left behind (e.g. the SWC variant).
_RE_ORPHAN_REACT_IMPORT = r"""^import\s+\w+\s+from\s+['"]@vitejs/plugin-react[^'"]*['"];?[ \t]*\n?"""

ENTRY_CANDIDATES = ("src/main.tsx", "src/main.jsx")


class PreactPrerenderStrategy(BaseStrategy):
    """Static prerendering through ``@preact/preset-vite``."""

    strategy = Strategy.PREACT

    async def steps(self, ctx: StrategyContext, plan: TransformationPlan) -> None:
        changed = merge_dependencies(ctx.project.manifest, PREACT_DEPENDENCIES)
        plan.record(self.persist_manifest(ctx, "preact dependencies", changed))

        plan.record(
            ctx.rewriter.apply(
                "switch vite plugin to preact",
                lambda text: ensure_import(
                    text, _RE_REACT_PLUGIN_IMPORT, PREACT_PLUGIN_IMPORT, "@preact/preset-vite"
                ),
                lambda text: replace_invocation(text, _RE_REACT_PLUGIN_CALL, PREACT_PLUGIN_CALL),
                lambda text: remove_import_lines(text, _RE_ORPHAN_REACT_IMPORT),
            )
        )

        entry = self.entry_path(ctx)
        plan.record(
            rewrite_html_entry(
                ctx.project.root,
                "mark index.html entry as prerender",
                lambda html: mark_entry_prerender(html, f"/{entry}"),
            )
        )

        mount_id = detect_mount_element_id(read_html_entry(ctx.project.root))
        plan.record(
            await ctx.emitter.emit(
                "preact/main.jsx.j2", entry, ctx.template_context(mount_id=mount_id)
            )
        )

        plan.extend(await self.ensure_dotfiles(ctx))

    @staticmethod
    def entry_path(ctx: StrategyContext) -> str:
        """The existing ``src/main.tsx`` or ``src/main.jsx``; ``src/main.tsx`` if neither."""
        for candidate in ENTRY_CANDIDATES:
            if (ctx.project.root / candidate).is_file():
                return candidate
        return ENTRY_CANDIDATES[0]
