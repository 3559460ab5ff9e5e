"""Writing generated artifacts under their overwrite policy.

Generator-owned files (``ALWAYS_OVERWRITE``) are rewritten on every run and
must render identically for identical inputs.  User-owned files
(``CREATE_IF_ABSENT``, e.g. ``.env`` and ``.gitignore``) are created once and
never touched again, so re-running the pipeline cannot clobber user edits.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from seo_bootstrap.errors import TemplateWriteFailure
from seo_bootstrap.models import GeneratedArtifact, OverwritePolicy, SkipReason, StepOutcome
from seo_bootstrap.utils import print_step

from .templates import TemplateRenderer


class TemplateEmitter:
    """Renders templates and writes them into a project tree."""

    def __init__(self, root: str | Path, renderer: TemplateRenderer | None = None) -> None:
        self.root = Path(root)
        self.renderer = renderer or TemplateRenderer()

    def target(self, artifact: GeneratedArtifact) -> Path:
        return self.root / artifact.path

    async def write(self, artifact: GeneratedArtifact) -> StepOutcome:
        """Write *artifact* according to its policy.

        Returns:
            ``applied`` when the file was written, ``skipped(already_present)``
            when a user-owned file already exists.

        Raises:
            TemplateWriteFailure: If the file system refuses the write.
        """
        out = self.target(artifact)
        step = f"write {artifact.path}"

        if artifact.policy is OverwritePolicy.CREATE_IF_ABSENT and out.exists():
            return StepOutcome.skipped(step, SkipReason.ALREADY_PRESENT, artifact.path)

        try:
            await asyncio.to_thread(_write_file, out, artifact.content)
        except OSError as exc:
            raise TemplateWriteFailure(out, str(exc)) from exc

        print_step(f"Wrote {artifact.path}")
        return StepOutcome.applied(step, artifact.path)

    async def emit(
        self,
        template_path: str,
        relative_path: str,
        context: dict[str, Any],
        policy: OverwritePolicy = OverwritePolicy.ALWAYS_OVERWRITE,
    ) -> StepOutcome:
        """Render *template_path* and write it to *relative_path*."""
        artifact = GeneratedArtifact(
            path=relative_path,
            content=self.renderer.render(template_path, context),
            policy=policy,
        )
        return await self.write(artifact)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
