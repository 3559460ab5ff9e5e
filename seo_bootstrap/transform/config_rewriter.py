"""Textual patching of the Vite build configuration.

The configuration is JavaScript/TypeScript, and nothing in this module parses
it.  Flat call replacements are single-shot regex substitutions; removing a
plugin call whose arguments nest arbitrarily deep (arrow functions, object
literals) uses an explicit depth-counting scan instead, because a regex
cannot match balanced parentheses of unbounded depth.

Known limitation: the scan does not understand strings or comments, so a
callee token or a stray parenthesis inside either can throw it off.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from pathlib import Path
from typing import Optional

from seo_bootstrap.models import SkipReason, StepOutcome
from seo_bootstrap.utils import print_step, print_warning

CONFIG_FILENAMES: tuple[str, ...] = ("vite.config.ts", "vite.config.js")

# Bytes that are not valid UTF-8 round-trip unchanged through read and write.
TEXT_ERRORS = "surrogateescape"

_RE_DANGLING_COMMA = re.compile(r",\s*]")


# ---------------------------------------------------------------------------
# Locating the file
# ---------------------------------------------------------------------------


def locate_config(root: str | Path) -> Optional[Path]:
    """Return the first existing Vite config under *root*, TypeScript first."""
    for name in CONFIG_FILENAMES:
        candidate = Path(root) / name
        if candidate.is_file():
            return candidate
    return None


# ---------------------------------------------------------------------------
# Text edits
# ---------------------------------------------------------------------------


def ensure_import(text: str, old_pattern: str, new_line: str, guard: str) -> str:
    """Replace the import matched by *old_pattern* with *new_line*.

    Nothing happens when *guard* (typically the new module specifier) is
    already present, or when no import matches.
    """
    if guard in text:
        return text
    return re.sub(old_pattern, lambda _m: new_line, text, count=1)


def replace_invocation(text: str, pattern: str, replacement: str) -> str:
    """Replace the first call matched by *pattern* with *replacement*.

    Only suitable for calls whose argument list does not nest parentheses.
    """
    return re.sub(pattern, lambda _m: replacement, text, count=1)


def remove_import_lines(text: str, pattern: str) -> str:
    """Delete every whole line matched by *pattern* (multiline mode)."""
    return re.sub(pattern, "", text, flags=re.MULTILINE)


def find_call_end(text: str, start: int) -> int:
    """Return the index just past the parenthesis that closes the call at *start*.

    Scans forward from *start*, counting ``(`` and ``)``.  The first time the
    depth falls back to zero the call is complete.

    Returns:
        The end index, or ``-1`` if the parentheses never balance.
    """
    depth = 0
    for index in range(start, len(text)):
        char = text[index]
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return index + 1
    return -1


def collapse_dangling_commas(text: str) -> str:
    """Turn ``a, ]`` into ``a]`` anywhere in *text*."""
    return _RE_DANGLING_COMMA.sub("]", text)


def remove_invocation(text: str, callee: str) -> str:
    """Remove the first ``callee(...)`` call expression from *text*.

    The span runs from the callee token through its balancing ``)``, then
    swallows any commas and whitespace that directly follow it.  Afterwards
    trailing commas left in front of a ``]`` are collapsed.

    Example::

        remove_invocation("plugins: [pluginX({ a: () => 1 }), pluginY()]", "pluginX")
        -> "plugins: [pluginY()]"
    """
    start = text.find(f"{callee}(")
    if start != -1:
        end = find_call_end(text, start)
        if end != -1:
            while end < len(text) and (text[end] == "," or text[end].isspace()):
                end += 1
            text = text[:start] + text[end:]
    return collapse_dangling_commas(text)


# ---------------------------------------------------------------------------
# File-level rewriter
# ---------------------------------------------------------------------------


TextEdit = Callable[[str], str]


class ConfigRewriter:
    """Applies text edits to a project's Vite configuration file.

    Every call returns a :class:`StepOutcome`; a missing configuration file
    is an expected situation and is reported as skipped, never raised.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    @property
    def path(self) -> Optional[Path]:
        return locate_config(self.root)

    def apply(self, step: str, *edits: TextEdit) -> StepOutcome:
        """Run *edits* in order over the config text and save if it changed."""
        config_path = self.path
        if config_path is None:
            print_step(f"Skipped {step} (no vite.config.ts or vite.config.js)")
            return StepOutcome.skipped(step, SkipReason.CONFIG_FILE_ABSENT)

        try:
            original = config_path.read_text(encoding="utf-8", errors=TEXT_ERRORS)
        except OSError as exc:
            print_warning(f"  Skipped {step}: could not read {config_path.name} ({exc})")
            return StepOutcome.skipped(step, SkipReason.FILE_UNREADABLE, config_path.name)

        updated = original
        for edit in edits:
            updated = edit(updated)

        if updated == original:
            print_step(f"{config_path.name} already up to date")
            return StepOutcome.skipped(step, SkipReason.NO_CHANGES, config_path.name)

        config_path.write_text(updated, encoding="utf-8", errors=TEXT_ERRORS)
        print_step(f"Updated {config_path.name}")
        return StepOutcome.applied(step, config_path.name)
