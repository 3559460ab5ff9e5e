"""Heuristic structural analysis of an unknown Vite project.

Discovers the routes a project exposes by looking at conventional page
directories and at literal ``path="..."`` attributes in entry files.  This is
a lexical scan, not a parser: routes built programmatically are invisible to
it and it can both over- and under-detect.  Every step tolerates missing or
unreadable files and simply moves on.
"""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, Field

from seo_bootstrap.models import Manifest, ProjectDescriptor, SkipReason
from seo_bootstrap.utils import console, print_step, print_warning


# ---------------------------------------------------------------------------
# Conventions
# ---------------------------------------------------------------------------

PAGES_DIRS: tuple[str, ...] = ("src/pages", "src/views")

COMPONENT_EXTENSIONS: frozenset[str] = frozenset({".js", ".jsx", ".ts", ".tsx"})

ROUTE_ENTRY_FILES: tuple[str, ...] = (
    "src/App.tsx",
    "src/App.jsx",
    "src/main.tsx",
    "src/main.jsx",
    "src/routes.tsx",
    "src/routes.jsx",
)

HOME_STEMS = frozenset({"index", "home"})

REACT_MARKERS = ("react", "@vitejs/plugin-react", "@vitejs/plugin-react-swc")
PREACT_MARKERS = ("preact", "@preact/preset-vite")

MOUNT_ID_CANDIDATES = ("root", "app", "main")
DEFAULT_MOUNT_ID = "root"

# path="/about", path='/contact', path="about"
_RE_ROUTE_PATH = re.compile(r"""path=['"]/?([^'"]+)['"]""")

_RE_MOUNT_CONVENTIONAL = re.compile(
    r"""<div[^>]*id=["'](root|app|main)["'][^>]*>""", re.IGNORECASE
)
_RE_MOUNT_ANY = re.compile(r"""<div[^>]*id=["']([^"']+)["'][^>]*>""", re.IGNORECASE)


class FrameworkInfo(BaseModel):
    """UI framework markers found in the manifest."""

    uses_react: bool = Field(default=False)
    uses_preact: bool = Field(default=False)


# ---------------------------------------------------------------------------
# Route detection
# ---------------------------------------------------------------------------


def _route_from_filename(file_path: Path) -> str:
    stem = file_path.stem.lower()
    if stem in HOME_STEMS:
        return "/"
    return "/" + stem


def _scan_pages(root: Path, routes: set[str], skipped: list[str]) -> None:
    for rel_dir in PAGES_DIRS:
        pages = root / rel_dir
        if not pages.is_dir():
            continue
        try:
            entries = sorted(pages.iterdir())
        except OSError:
            skipped.append(rel_dir)
            continue
        for entry in entries:
            if entry.suffix in COMPONENT_EXTENSIONS and entry.is_file():
                routes.add(_route_from_filename(entry))


def _scan_entry_files(root: Path, routes: set[str], skipped: list[str]) -> None:
    for rel_path in ROUTE_ENTRY_FILES:
        file_path = root / rel_path
        if not file_path.is_file():
            continue
        try:
            content = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            skipped.append(rel_path)
            continue
        for match in _RE_ROUTE_PATH.finditer(content):
            value = match.group(1)
            # Wildcards and dynamic params cannot be prerendered.
            if "*" in value or ":" in value:
                continue
            routes.add("/" + value.lstrip("/"))


def detect_routes(root: str | Path) -> list[str]:
    """Discover the routes a project exposes.

    Args:
        root: Project root directory.

    Returns:
        Sorted, deduplicated route paths.  Always contains ``"/"``.
    """
    project_root = Path(root)
    routes: set[str] = {"/"}
    skipped: list[str] = []

    _scan_pages(project_root, routes, skipped)
    _scan_entry_files(project_root, routes, skipped)

    for rel_path in skipped:
        print_warning(f"  {SkipReason.ROUTE_SCAN_SKIPPED.value}: could not read {rel_path}")

    return sorted(routes)


# ---------------------------------------------------------------------------
# Project analysis
# ---------------------------------------------------------------------------


def detect_framework(manifest: Manifest) -> FrameworkInfo:
    """Report which UI framework the manifest declares, if any."""
    return FrameworkInfo(
        uses_react=any(manifest.declares(dep) for dep in REACT_MARKERS),
        uses_preact=any(manifest.declares(dep) for dep in PREACT_MARKERS),
    )


def analyze_project(root: str | Path, manifest: Manifest) -> ProjectDescriptor:
    """Build the :class:`ProjectDescriptor` for *root*."""
    project_root = Path(root).resolve()
    print_step("Analyzing project structure...")

    framework = detect_framework(manifest)
    if not framework.uses_react and not framework.uses_preact:
        print_warning(
            "Warning: no React or Preact dependency detected. Proceeding anyway; "
            "you can ignore this if you plan to add one later."
        )

    routes = detect_routes(project_root)
    console.print(f"[dim]·[/dim] Detected routes: {', '.join(routes)}")

    return ProjectDescriptor(
        root=project_root,
        manifest=manifest,
        routes=routes,
        has_components_dir=(project_root / "src" / "components").is_dir(),
    )


# ---------------------------------------------------------------------------
# HTML entry inspection
# ---------------------------------------------------------------------------


def detect_mount_element_id(html: str | None) -> str:
    """Find the id of the element the app mounts into.

    Conventional ids (``root``, ``app``, ``main``) win; otherwise the first
    ``<div>`` carrying any id is used; otherwise ``"root"``.
    """
    if not html:
        return DEFAULT_MOUNT_ID
    match = _RE_MOUNT_CONVENTIONAL.search(html)
    if match:
        return match.group(1)
    match = _RE_MOUNT_ANY.search(html)
    if match:
        return match.group(1)
    return DEFAULT_MOUNT_ID
