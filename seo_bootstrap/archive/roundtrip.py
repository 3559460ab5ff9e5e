"""Zip archive round trip for uploaded projects.

Extracts an uploaded archive into an exclusively owned temporary directory,
resolves the real project root inside it (archivers often wrap everything in
a single top-level folder), and repackages the transformed tree afterwards.
"""

from __future__ import annotations

import shutil
import tempfile
import zipfile
import zlib
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from seo_bootstrap.errors import ExtractionFailure, MissingManifest, PackagingFailure
from seo_bootstrap.models import MANIFEST_NAME
from seo_bootstrap.utils import console

# Directories created by operating systems or archivers, never part of a project.
SIDECAR_ENTRIES = frozenset({"__MACOSX", "Thumbs.db", "desktop.ini"})


# ---------------------------------------------------------------------------
# Working directory
# ---------------------------------------------------------------------------


@contextmanager
def working_directory(prefix: str = "vite-seo-bootstrap-zip-") -> Iterator[Path]:
    """Create a uniquely named temporary directory and remove it on exit.

    The directory is released exactly once, whether the body returns
    normally or raises.
    """
    path = Path(tempfile.mkdtemp(prefix=prefix))
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


def _validate_entry(info: zipfile.ZipInfo, archive: Path) -> None:
    """Reject entries that would land outside the extraction directory."""
    name = info.filename
    if "\x00" in name:
        raise ExtractionFailure(archive, f"null byte in entry name {name!r}")
    normalized = name.replace("\\", "/")
    if normalized.startswith("/") or (len(normalized) > 1 and normalized[1] == ":"):
        raise ExtractionFailure(archive, f"absolute path not allowed: {name}")
    if ".." in normalized.split("/"):
        raise ExtractionFailure(archive, f"directory traversal not allowed: {name}")
    unix_mode = (info.external_attr >> 16) & 0xFFFF
    if (unix_mode & 0o170000) == 0o120000:
        raise ExtractionFailure(archive, f"symlinks not allowed: {name}")


def extract(archive_path: str | Path, destination: str | Path) -> Path:
    """Decompress every entry of *archive_path* into *destination*.

    Relative paths and file bytes are preserved exactly.  All entries are
    validated first; an archive holding a symlink or an escaping path is
    rejected as a whole and nothing is extracted.

    Raises:
        ExtractionFailure: If the archive is missing, corrupt or contains
            unsafe entries.
    """
    archive = Path(archive_path)
    target = Path(destination)
    if not archive.is_file():
        raise ExtractionFailure(archive, "specified file does not exist")

    try:
        with zipfile.ZipFile(archive) as zf:
            for info in zf.infolist():
                _validate_entry(info, archive)
            bad = zf.testzip()
            if bad is not None:
                raise ExtractionFailure(archive, f"corrupt entry {bad}")
            zf.extractall(target)
    except (zipfile.BadZipFile, zlib.error, EOFError) as exc:
        raise ExtractionFailure(archive, str(exc)) from exc
    except OSError as exc:
        raise ExtractionFailure(archive, str(exc)) from exc

    return target


# ---------------------------------------------------------------------------
# Root detection
# ---------------------------------------------------------------------------


def _is_hidden(entry: Path) -> bool:
    return entry.name.startswith(".") or entry.name in SIDECAR_ENTRIES


def detect_project_root(directory: str | Path) -> Path:
    """Resolve the project root inside an extracted archive.

    Hidden entries and OS sidecar folders are ignored.  If exactly one entry
    remains and it is a directory, the project lives inside it; otherwise the
    extraction directory itself is the root.

    Raises:
        MissingManifest: If the resolved root has no ``package.json``.
    """
    base = Path(directory)
    entries = [e for e in sorted(base.iterdir()) if not _is_hidden(e)]

    root = base
    if len(entries) == 1 and entries[0].is_dir():
        root = entries[0]
        console.print(f"[dim]·[/dim] Detected wrapped project folder: {root.name}/")

    if not (root / MANIFEST_NAME).is_file():
        raise MissingManifest(root)
    return root


# ---------------------------------------------------------------------------
# Packaging
# ---------------------------------------------------------------------------


def output_archive_path(archive_path: str | Path, suffix: str = "-seo-ssg") -> Path:
    """Return ``<dir>/<stem><suffix>.zip`` for an input archive path."""
    archive = Path(archive_path)
    return archive.with_name(f"{archive.stem}{suffix}.zip")


def pack(root: str | Path, output_path: str | Path) -> Path:
    """Zip every file under *root* using paths relative to *root*.

    Entries are written in sorted order so the same tree always produces
    the same entry list.

    Raises:
        PackagingFailure: If the archive cannot be written.
    """
    base = Path(root)
    output = Path(output_path)
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(output, "w", zipfile.ZIP_DEFLATED) as zf:
            entries = sorted(
                (p.relative_to(base).as_posix(), p) for p in base.rglob("*") if p.is_file()
            )
            for arcname, file_path in entries:
                if file_path.resolve() == output.resolve():
                    continue
                zf.write(file_path, arcname)
    except OSError as exc:
        # A partially written archive is never handed back.
        if output.is_file():
            output.unlink()
        raise PackagingFailure(output, str(exc)) from exc
    return output
