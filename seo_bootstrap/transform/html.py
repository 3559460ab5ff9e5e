"""Rewrites of the project's ``index.html`` entry script tag."""

from __future__ import annotations

import re
from collections.abc import Callable
from pathlib import Path
from typing import Optional

from seo_bootstrap.models import SkipReason, StepOutcome
from seo_bootstrap.utils import print_step, print_warning

from .config_rewriter import TEXT_ERRORS

HTML_ENTRY = "index.html"

# <script type="module" src="/src/main.tsx"></script>
_RE_ENTRY_SCRIPT_TAG = re.compile(
    r"""<script\s+[^>]*src=["']/?src/(main[^"']*)["'][^>]*></script>"""
)
_RE_ENTRY_SCRIPT_OPEN = re.compile(
    r"""<script([^>]*?)src=["']/?src/main[^"']*["']""", re.IGNORECASE
)
_RE_PRERENDER_ATTR = re.compile(r"<script\b[^>]*\bprerender\b", re.IGNORECASE)


def read_html_entry(root: str | Path) -> Optional[str]:
    """Return the text of ``index.html``, or ``None`` if it is missing or unreadable."""
    path = Path(root) / HTML_ENTRY
    if not path.is_file():
        return None
    try:
        return path.read_text(encoding="utf-8", errors=TEXT_ERRORS)
    except OSError as exc:
        print_warning(f"  Could not read {HTML_ENTRY} ({exc})")
        return None


def point_entry_script(html: str, src: str) -> str:
    """Point the ``/src/main.*`` module script at *src*."""
    return _RE_ENTRY_SCRIPT_TAG.sub(
        lambda _m: f'<script type="module" src="{src}"></script>', html, count=1
    )


def mark_entry_prerender(html: str, src: str) -> str:
    """Add the ``prerender`` attribute to the entry script and point it at *src*.

    Already-marked scripts are left alone so the edit is idempotent.
    """
    if _RE_PRERENDER_ATTR.search(html):
        return html
    return _RE_ENTRY_SCRIPT_OPEN.sub(
        lambda m: f'<script prerender{m.group(1)}src="{src}"', html, count=1
    )


def rewrite_html_entry(
    root: str | Path, step: str, edit: Callable[[str], str]
) -> StepOutcome:
    """Apply *edit* to ``index.html``; a missing or unreadable file or no change is a skip."""
    path = Path(root) / HTML_ENTRY
    if not path.is_file():
        print_step(f"Skipped {HTML_ENTRY} update (file not found)")
        return StepOutcome.skipped(step, SkipReason.HTML_ENTRY_ABSENT)

    html = read_html_entry(root)
    if html is None:
        return StepOutcome.skipped(step, SkipReason.FILE_UNREADABLE, HTML_ENTRY)

    updated = edit(html)
    if updated == html:
        return StepOutcome.skipped(step, SkipReason.NO_CHANGES, HTML_ENTRY)

    path.write_text(updated, encoding="utf-8", errors=TEXT_ERRORS)
    print_step(f"Updated {HTML_ENTRY}")
    return StepOutcome.applied(step, HTML_ENTRY)
