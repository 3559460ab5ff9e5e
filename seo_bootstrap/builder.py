"""Optional external install/build step.

Runs ``npm install`` followed by ``npm run build`` inside the transformed
project.  The commands are opaque: only their exit status matters.  A failed
build never undoes transformation output that is already on disk.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from seo_bootstrap.config import Settings
from seo_bootstrap.errors import BuildFailure
from seo_bootstrap.utils import format_duration, print_step, run_command

_STDERR_TAIL = 2000


class BuildResult(BaseModel):
    """Outcome of the install/build commands."""

    success: bool = Field(default=False)
    failed_command: Optional[str] = Field(default=None)
    returncode: int = Field(default=0)
    stderr: str = Field(default="", description="Tail of the failing command's stderr")
    duration: str = Field(default="")

    def ensure_success(self) -> None:
        """Raise :class:`BuildFailure` if the build did not succeed."""
        if not self.success:
            raise BuildFailure(self.failed_command or "build", self.returncode, self.stderr)


async def run_build(root: str | Path, settings: Settings) -> BuildResult:
    """Install dependencies and build the project at *root*.

    Returns:
        A ``BuildResult``; failures are reported, not raised.
    """
    import time

    start = time.monotonic()
    commands = (
        ("Installing dependencies (this may take a while)...", [settings.npm_command, "install"]),
        ("Running build...", [settings.npm_command, "run", "build"]),
    )
    for message, cmd in commands:
        print_step(message)
        returncode, _stdout, stderr = await run_command(
            cmd, cwd=root, timeout=settings.build_timeout
        )
        if returncode != 0:
            return BuildResult(
                success=False,
                failed_command=" ".join(cmd),
                returncode=returncode,
                stderr=stderr[-_STDERR_TAIL:],
                duration=format_duration(time.monotonic() - start),
            )

    return BuildResult(success=True, duration=format_duration(time.monotonic() - start))
