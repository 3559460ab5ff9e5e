"""Exception hierarchy for the SEO bootstrap pipeline.

Only fatal conditions are modelled as exceptions.  Expected absences (no
build config, no ``index.html``, unreadable route files) are reported as
skipped :class:`~seo_bootstrap.models.StepOutcome` values instead.
"""

from __future__ import annotations

from pathlib import Path


class BootstrapError(Exception):
    """Base class for every error raised by the pipeline."""


class ExtractionFailure(BootstrapError):
    """Raised when an input archive cannot be read or safely extracted."""

    def __init__(self, archive: str | Path, reason: str) -> None:
        self.archive = Path(archive)
        self.reason = reason
        super().__init__(f"Could not extract {self.archive.name}: {reason}")


class MissingManifest(BootstrapError):
    """Raised when no readable ``package.json`` exists at the project root."""

    def __init__(self, root: str | Path, reason: str = "package.json not found") -> None:
        self.root = Path(root)
        self.reason = reason
        super().__init__(
            f"Could not read package.json from {self.root} ({reason}). "
            "Ensure you are pointing to the root of a Vite project."
        )


class TemplateWriteFailure(BootstrapError):
    """Raised when a generated artifact cannot be written to disk."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Failed to write {self.path}: {reason}")


class PackagingFailure(BootstrapError):
    """Raised when the transformed tree cannot be repackaged."""

    def __init__(self, output: str | Path, reason: str) -> None:
        self.output = Path(output)
        self.reason = reason
        super().__init__(f"Error creating output archive {self.output.name}: {reason}")


class BuildFailure(BootstrapError):
    """Raised when the external install/build command exits unsuccessfully."""

    def __init__(self, command: str, returncode: int, stderr: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"Command '{command}' failed with code {returncode}")
