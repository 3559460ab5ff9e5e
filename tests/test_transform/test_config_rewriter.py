"""Tests for Vite config patching (seo_bootstrap.transform.config_rewriter).

Covers:
- locate_config precedence
- find_call_end balanced scanning
- remove_invocation with nested arguments and comma cleanup
- ensure_import / replace_invocation / remove_import_lines
- ConfigRewriter outcomes (absent file, unreadable file, no change, applied)
- Non-UTF-8 bytes preserved across an edit
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from seo_bootstrap.models import SkipReason, StepStatus
from seo_bootstrap.transform import (
    ConfigRewriter,
    ensure_import,
    find_call_end,
    locate_config,
    remove_import_lines,
    remove_invocation,
    replace_invocation,
)
from seo_bootstrap.transform.config_rewriter import collapse_dangling_commas


# ---------------------------------------------------------------------------
# Markers
# ---------------------------------------------------------------------------

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# locate_config
# ---------------------------------------------------------------------------


class TestLocateConfig:
    def test_prefers_typescript(self, tmp_path: Path):
        (tmp_path / "vite.config.js").write_text("", encoding="utf-8")
        (tmp_path / "vite.config.ts").write_text("", encoding="utf-8")
        assert locate_config(tmp_path) == tmp_path / "vite.config.ts"

    def test_javascript_fallback(self, tmp_path: Path):
        (tmp_path / "vite.config.js").write_text("", encoding="utf-8")
        assert locate_config(tmp_path) == tmp_path / "vite.config.js"

    def test_none(self, tmp_path: Path):
        assert locate_config(tmp_path) is None


# ---------------------------------------------------------------------------
# Balanced call scanning
# ---------------------------------------------------------------------------


class TestFindCallEnd:
    def test_flat_call(self):
        text = "foo(a, b) + 1"
        assert text[: find_call_end(text, 0)] == "foo(a, b)"

    def test_nested_call(self):
        text = "x(y(z()), { f: () => (1) }) rest"
        end = find_call_end(text, 0)
        assert text[:end] == "x(y(z()), { f: () => (1) })"

    def test_unbalanced(self):
        assert find_call_end("foo(bar(", 0) == -1


class TestRemoveInvocation:
    def test_nested_arguments(self):
        text = "plugins: [pluginX({ a: () => 1 }), pluginY()]"
        assert remove_invocation(text, "pluginX") == "plugins: [pluginY()]"

    def test_nested_brackets_in_arguments(self):
        text = "plugins: [pluginX({ includedRoutes: () => [{path:'/'}] }), pluginY()]"
        assert remove_invocation(text, "pluginX") == "plugins: [pluginY()]"

    def test_last_element_leaves_no_dangling_comma(self):
        text = "plugins: [react(), viteSSG({ includedRoutes: () => routes })]"
        assert remove_invocation(text, "viteSSG") == "plugins: [react()]"

    def test_multiline_block(self):
        text = (
            "  plugins: [\n"
            "    react(),\n"
            "    viteSSG({\n"
            "      includedRoutes: () => routes\n"
            "    }),\n"
            "    ViteSitemap({ baseUrl: 'x' }),\n"
            "  ],\n"
        )
        result = remove_invocation(text, "viteSSG")
        assert "viteSSG" not in result
        assert "react(),\n    ViteSitemap({ baseUrl: 'x' })" in result
        assert result.count("(") == result.count(")")

    def test_absent_callee_is_noop(self):
        text = "plugins: [react()]"
        assert remove_invocation(text, "viteSSG") == text

    def test_unbalanced_call_left_alone(self):
        text = "plugins: [viteSSG(oops]"
        assert remove_invocation(text, "viteSSG") == text

    def test_collapse_dangling_commas(self):
        assert collapse_dangling_commas("[a, b,\n  ]") == "[a, b]"


# ---------------------------------------------------------------------------
# Import & flat call edits
# ---------------------------------------------------------------------------


REACT_IMPORT = r"""import\s+react\s+from\s+['"]@vitejs/plugin-react[^'"]*['"];?\n"""


class TestTextEdits:
    def test_ensure_import_replaces(self):
        text = "import react from '@vitejs/plugin-react'\nexport default {}\n"
        result = ensure_import(
            text, REACT_IMPORT, "import preact from '@preact/preset-vite';\n", "@preact/preset-vite"
        )
        assert result == "import preact from '@preact/preset-vite';\nexport default {}\n"

    def test_ensure_import_guarded(self):
        text = "import preact from '@preact/preset-vite';\nimport react from '@vitejs/plugin-react'\n"
        assert ensure_import(text, REACT_IMPORT, "ignored\n", "@preact/preset-vite") == text

    def test_ensure_import_without_match(self):
        text = "export default {}\n"
        assert ensure_import(text, REACT_IMPORT, "x\n", "@preact/preset-vite") == text

    def test_replace_invocation_first_only(self):
        text = "[react(), react({ a: 1 })]"
        result = replace_invocation(text, r"\breact\(([^)]*)\)", "preact()")
        assert result == "[preact(), react({ a: 1 })]"

    def test_replacement_is_literal(self):
        result = replace_invocation("react()", r"react\(\)", r"a\1b")
        assert result == r"a\1b"

    def test_remove_import_lines(self):
        text = "import a from 'a'\nimport { viteSSG } from 'vite-ssg/serialized-data'\nrest\n"
        result = remove_import_lines(text, r"^import\s+\{[^}]*\bviteSSG\b[^}]*}\s+from[^\n]*\n?")
        assert result == "import a from 'a'\nrest\n"


# ---------------------------------------------------------------------------
# ConfigRewriter
# ---------------------------------------------------------------------------


class TestConfigRewriter:
    def test_absent_config_is_skipped(self, tmp_path: Path):
        outcome = ConfigRewriter(tmp_path).apply("edit", lambda text: text + "x")
        assert outcome.status is StepStatus.SKIPPED
        assert outcome.reason is SkipReason.CONFIG_FILE_ABSENT
        assert not (tmp_path / "vite.config.ts").exists()

    def test_unchanged_text_is_not_written(self, tmp_path: Path):
        config = tmp_path / "vite.config.js"
        config.write_text("export default {}\n", encoding="utf-8")
        outcome = ConfigRewriter(tmp_path).apply("edit", lambda text: text)
        assert outcome.reason is SkipReason.NO_CHANGES

    def test_edits_applied_in_order(self, tmp_path: Path):
        config = tmp_path / "vite.config.ts"
        config.write_text("a", encoding="utf-8")
        outcome = ConfigRewriter(tmp_path).apply(
            "edit", lambda text: text + "b", lambda text: text.replace("ab", "c")
        )
        assert outcome.was_applied
        assert outcome.detail == "vite.config.ts"
        assert config.read_text(encoding="utf-8") == "c"

    def test_non_utf8_bytes_survive_edit(self, tmp_path: Path):
        config = tmp_path / "vite.config.js"
        config.write_bytes(b"// Caf\xe9 config\nexport default { plugins: [react()] }\n")
        outcome = ConfigRewriter(tmp_path).apply(
            "edit", lambda text: text.replace("react()", "preact()")
        )
        assert outcome.was_applied
        assert config.read_bytes() == b"// Caf\xe9 config\nexport default { plugins: [preact()] }\n"

    def test_unreadable_config_is_skipped(self, tmp_path: Path):
        config = tmp_path / "vite.config.ts"
        config.write_text("export default {}\n", encoding="utf-8")
        with patch.object(Path, "read_text", side_effect=PermissionError("denied")):
            outcome = ConfigRewriter(tmp_path).apply("edit", lambda text: text + "x")
        assert outcome.reason is SkipReason.FILE_UNREADABLE
        assert outcome.detail == "vite.config.ts"
        assert config.read_bytes() == b"export default {}\n"
