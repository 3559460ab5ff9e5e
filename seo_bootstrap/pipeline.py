"""SEO bootstrap pipeline orchestrator.

Drives one transformation run end to end:

    extract -> detect root -> analyze -> strategy -> pin versions
            -> optional npm install/build -> pack -> cleanup

Usage::

    python -m seo_bootstrap.pipeline optimize ./my-vite-app --domain=https://example.org
    python -m seo_bootstrap.pipeline apply-zip site.zip --strategy=preact --build
"""

from __future__ import annotations

import asyncio
import sys
import time
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from seo_bootstrap.analyzer import analyze_project
from seo_bootstrap.archive import (
    detect_project_root,
    extract,
    output_archive_path,
    pack,
    working_directory,
)
from seo_bootstrap.builder import BuildResult, run_build
from seo_bootstrap.config import DEFAULT_DOMAIN, Settings
from seo_bootstrap.errors import BootstrapError, MissingManifest
from seo_bootstrap.models import (
    MANIFEST_NAME,
    SkipReason,
    StepOutcome,
    TransformationPlan,
)
from seo_bootstrap.strategies import StrategyContext, dispatch
from seo_bootstrap.transform import load_manifest, pin_versions, save_manifest
from seo_bootstrap.utils import (
    console,
    format_duration,
    print_banner,
    print_error,
    print_step,
    print_success,
    print_summary_table,
    print_warning,
)

# Declared versions known not to resolve on the registry, with their repair.
VERSION_PINS: dict[str, tuple[str, str]] = {
    "vite-bundle-visualizer": (r"^\^?1\.\d+\.\d+", "^1.2.1"),
}


class RunResult(BaseModel):
    """What a pipeline run produced."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool = Field(default=False)
    plan: Optional[TransformationPlan] = Field(default=None)
    output_path: Optional[Path] = Field(default=None)
    build: Optional[BuildResult] = Field(default=None)
    error: Optional[str] = Field(default=None, description="First fatal error, if any")
    duration: str = Field(default="")


# ---------------------------------------------------------------------------
# Pipeline Orchestrator
# ---------------------------------------------------------------------------


class Pipeline:
    """Applies the selected strategy to a project directory or a zip archive.

    Attributes:
        settings: Inputs for this run (domain, strategy, build flag).
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    # ------------------------------------------------------------------
    # Transformation
    # ------------------------------------------------------------------

    async def transform(self, root: str | Path) -> TransformationPlan:
        """Analyze *root* and apply the configured strategy to it.

        Raises:
            MissingManifest: If ``package.json`` is absent or unreadable.
            TemplateWriteFailure: If a generated file cannot be written.
        """
        project_root = Path(root).resolve()
        manifest = load_manifest(project_root)
        project = analyze_project(project_root, manifest)

        strategy = dispatch(self.settings.strategy)
        ctx = StrategyContext(project=project, settings=self.settings)
        plan = await strategy.run(ctx)

        plan.record(self.pin_known_versions(project_root, ctx))
        return plan

    @staticmethod
    def pin_known_versions(root: Path, ctx: StrategyContext) -> StepOutcome:
        step = "pin known versions"
        manifest = ctx.project.manifest
        if not pin_versions(manifest, VERSION_PINS):
            return StepOutcome.skipped(step, SkipReason.NO_CHANGES)
        save_manifest(root, manifest)
        print_step("Patched package.json dependencies")
        return StepOutcome.applied(step, MANIFEST_NAME)

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def run_directory(self, project_dir: str | Path) -> RunResult:
        """Transform a project directory in place.

        A failing build is fatal here, since there is no archive to hand
        back and the user asked for a build explicitly.
        """
        start = time.monotonic()
        root = Path(project_dir).resolve()
        self._print_banner(str(root))
        result = RunResult()

        try:
            if not root.is_dir():
                raise MissingManifest(root, "specified path does not exist or is not a directory")
            result.plan = await self.transform(root)
            self._print_plan(result.plan)

            if self.settings.build:
                result.build = await run_build(root, self.settings)
                result.build.ensure_success()
                print_step('Build complete! Check the "dist" folder.')
            else:
                print_step('Optimization complete. Run "npm install" and "npm run build" manually.')
            result.success = True
        except BootstrapError as exc:
            result.error = str(exc)
            print_error(f"Error: {exc}")

        result.duration = format_duration(time.monotonic() - start)
        return result

    async def run_archive(
        self, archive_path: str | Path, output_path: str | Path | None = None
    ) -> RunResult:
        """Transform a zipped project and write a new archive.

        The working directory is removed on every exit path.  Either the
        whole transformed archive is produced or ``error`` describes the
        first fatal condition; a failed optional build only leaves
        ``build.success`` false.
        """
        start = time.monotonic()
        archive = Path(archive_path).resolve()
        output = (
            Path(output_path)
            if output_path is not None
            else output_archive_path(archive, self.settings.output_suffix)
        )
        self._print_banner(str(archive))
        result = RunResult()

        try:
            with working_directory(self.settings.workdir_prefix) as workdir:
                print_step("Extracting zip...")
                extract(archive, workdir)
                root = detect_project_root(workdir)

                print_step("Running optimization...")
                result.plan = await self.transform(root)
                self._print_plan(result.plan)

                if self.settings.build:
                    result.build = await run_build(root, self.settings)
                    if not result.build.success:
                        print_error(
                            f"Error during install/build: {result.build.failed_command} "
                            f"exited with {result.build.returncode}"
                        )

                print_step("Compressing output...")
                result.output_path = pack(root, output)
            result.success = True
            print_success(f"Created optimized zip: {result.output_path}")
        except BootstrapError as exc:
            result.error = str(exc)
            print_error(f"Error: {exc}")

        result.duration = format_duration(time.monotonic() - start)
        return result

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def _print_banner(self, target: str) -> None:
        print_banner(
            "Vite SEO Bootstrap",
            {
                "Project": target,
                "Domain": self.settings.domain,
                "Strategy": self.settings.strategy.value,
                "Build": "yes" if self.settings.build else "no",
            },
        )

    @staticmethod
    def _print_plan(plan: TransformationPlan) -> None:
        rows = [
            (
                outcome.step,
                outcome.status.value,
                outcome.reason.value if outcome.reason else outcome.detail,
            )
            for outcome in plan.steps
        ]
        print_summary_table(rows, title=f"{plan.strategy.value} strategy")
        if not plan.applied_steps:
            print_warning("Nothing changed: the project already looks bootstrapped.")
        else:
            print_success("SEO/SSG bootstrap completed. Please review the changes.")


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``seo-bootstrap`` / ``python -m seo_bootstrap.pipeline``."""
    import argparse

    parser = argparse.ArgumentParser(
        prog="seo-bootstrap",
        description="Add SEO tooling and static generation to a Vite project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  seo-bootstrap optimize ./my-app --domain=https://example.org\n"
            "  seo-bootstrap apply-zip site.zip --strategy=preact --build\n"
        ),
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    optimize = subparsers.add_parser("optimize", help="Transform a project directory in place")
    optimize.add_argument("project", help="Path to the Vite project root")

    apply_zip = subparsers.add_parser("apply-zip", help="Transform a zipped project")
    apply_zip.add_argument("archive", help="Path to the project zip file")
    apply_zip.add_argument(
        "--output", "-o", default=None,
        help="Output archive (default: <name>-seo-ssg.zip next to the input)",
    )

    for sub in (optimize, apply_zip):
        sub.add_argument("--domain", default=None, help=f"Base URL (default: {DEFAULT_DOMAIN})")
        sub.add_argument(
            "--strategy", default=None,
            help="react (default) or preact; unknown values fall back to react",
        )
        sub.add_argument(
            "--build", action="store_true", default=None,
            help="Run npm install and npm run build after transforming",
        )

    args = parser.parse_args(argv)

    settings = Settings.from_env(domain=args.domain, strategy=args.strategy, build=args.build)
    pipeline = Pipeline(settings)

    if args.command == "optimize":
        result = asyncio.run(pipeline.run_directory(args.project))
    else:
        result = asyncio.run(pipeline.run_archive(args.archive, args.output))

    if not result.success:
        console.print("[bold red]Bootstrap failed.[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
