"""Additive, idempotent merging into ``package.json``.

Nothing here ever overwrites a value the user already declared: dependencies
are only added when absent from both mappings, and scripts are only edited by
swapping a marker token for its replacement, keeping any user flags around it.
The manifest is written back only when one of these operations changed it.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from seo_bootstrap.errors import MissingManifest
from seo_bootstrap.models import MANIFEST_NAME, Manifest
from seo_bootstrap.utils import load_json, save_json


# ---------------------------------------------------------------------------
# I/O
# ---------------------------------------------------------------------------


def load_manifest(root: str | Path) -> Manifest:
    """Read and parse ``<root>/package.json``.

    Raises:
        MissingManifest: If the file is absent, not a JSON object, or its
            dependency or script mappings have the wrong shape.
    """
    path = Path(root) / MANIFEST_NAME
    try:
        data = load_json(path)
    except FileNotFoundError as exc:
        raise MissingManifest(root) from exc
    except (json.JSONDecodeError, UnicodeDecodeError, ValueError) as exc:
        raise MissingManifest(root, f"invalid JSON: {exc}") from exc
    except OSError as exc:
        raise MissingManifest(root, str(exc)) from exc
    try:
        return Manifest.from_dict(data)
    except ValidationError as exc:
        raise MissingManifest(root, f"invalid manifest: {exc.error_count()} field error(s)") from exc


def save_manifest(root: str | Path, manifest: Manifest) -> bool:
    """Write the manifest back if, and only if, it was mutated.

    Returns:
        True if the file was written.
    """
    if not manifest.dirty:
        return False
    save_json(manifest.to_dict(), Path(root) / MANIFEST_NAME)
    manifest.mark_clean()
    return True


# ---------------------------------------------------------------------------
# Merging
# ---------------------------------------------------------------------------


def merge_dependencies(
    manifest: Manifest,
    required: Mapping[str, str] | None = None,
    dev_required: Mapping[str, str] | None = None,
) -> bool:
    """Add missing dependencies without touching declared ones.

    A package is added only when it appears in neither ``dependencies`` nor
    ``devDependencies``, so a name never ends up in both mappings.

    Args:
        manifest: The manifest to mutate.
        required: Runtime dependencies, ``{name: version_range}``.
        dev_required: Development dependencies, ``{name: version_range}``.

    Returns:
        Whether any dependency was added.
    """
    changed = False
    for name, version in (required or {}).items():
        if not manifest.declares(name):
            manifest.dependencies[name] = version
            changed = True
    for name, version in (dev_required or {}).items():
        if not manifest.declares(name):
            manifest.dev_dependencies[name] = version
            changed = True
    if changed:
        manifest.mark_dirty()
    return changed


def merge_scripts(
    manifest: Manifest,
    script_name: str,
    marker: str,
    replacement: str,
    default: Optional[str] = None,
) -> bool:
    """Swap *marker* for *replacement* inside a script, or set a default.

    ``"vite build --mode staging"`` with marker ``vite`` and replacement
    ``vite-react-ssg`` becomes ``"vite-react-ssg build --mode staging"``.
    Running it again is a no-op because the script now contains the
    replacement.

    Returns:
        Whether the script was changed or created.
    """
    current = manifest.scripts.get(script_name)
    if current is None:
        if default is None:
            return False
        manifest.scripts[script_name] = default
        manifest.mark_dirty()
        return True

    if not isinstance(current, str):
        return False
    if marker in current and replacement not in current:
        manifest.scripts[script_name] = current.replace(marker, replacement, 1)
        manifest.mark_dirty()
        return True
    return False


def ensure_script(manifest: Manifest, script_name: str, value: str) -> bool:
    """Set a script only when it is not already defined."""
    if manifest.scripts.get(script_name):
        return False
    manifest.scripts[script_name] = value
    manifest.mark_dirty()
    return True


def ensure_module_type(manifest: Manifest) -> bool:
    """Mark the package as an ES module (``"type": "module"``)."""
    if manifest.module_type == "module":
        return False
    manifest.module_type = "module"
    manifest.mark_dirty()
    return True


def pin_versions(manifest: Manifest, pins: Mapping[str, tuple[str, str]]) -> bool:
    """Repair declared versions that are known not to resolve.

    Args:
        pins: ``{package: (allowed_pattern, fallback_version)}``.  A declared
            version that does not match ``allowed_pattern`` (anchored at the
            start) is replaced by ``fallback_version``.  Undeclared packages
            are left alone.

    Returns:
        Whether any version was rewritten.
    """
    changed = False
    for name, (pattern, fallback) in pins.items():
        for mapping in (manifest.dependencies, manifest.dev_dependencies):
            declared = mapping.get(name)
            if declared is None:
                continue
            if not re.match(pattern, str(declared)):
                mapping[name] = fallback
                changed = True
    if changed:
        manifest.mark_dirty()
    return changed
