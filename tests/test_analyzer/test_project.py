"""Tests for project analysis (seo_bootstrap.analyzer).

Covers:
- detect_routes from page directories and literal path attributes
- Wildcard and dynamic segments are discarded
- Missing directories and unreadable files are tolerated
- detect_framework markers
- analyze_project descriptor
- detect_mount_element_id fallbacks
"""

from __future__ import annotations

from pathlib import Path

import pytest

from seo_bootstrap.analyzer import (
    analyze_project,
    detect_framework,
    detect_mount_element_id,
    detect_routes,
)
from seo_bootstrap.models import Manifest


# ---------------------------------------------------------------------------
# Markers
# ---------------------------------------------------------------------------

pytestmark = pytest.mark.unit


def _write(path: Path, content: str = "export default () => null\n") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


# ---------------------------------------------------------------------------
# detect_routes
# ---------------------------------------------------------------------------


class TestDetectRoutes:
    def test_empty_project_has_home_only(self, tmp_path: Path):
        assert detect_routes(tmp_path) == ["/"]

    def test_pages_directory(self, tmp_path: Path):
        _write(tmp_path / "src" / "pages" / "Index.tsx")
        _write(tmp_path / "src" / "pages" / "About.tsx")
        assert detect_routes(tmp_path) == ["/", "/about"]

    def test_views_directory_and_home_stem(self, tmp_path: Path):
        _write(tmp_path / "src" / "views" / "Home.jsx")
        _write(tmp_path / "src" / "views" / "Pricing.js")
        assert detect_routes(tmp_path) == ["/", "/pricing"]

    def test_ignores_non_component_files(self, tmp_path: Path):
        _write(tmp_path / "src" / "pages" / "styles.css", "body {}")
        _write(tmp_path / "src" / "pages" / "notes.md", "# notes")
        assert detect_routes(tmp_path) == ["/"]

    def test_literal_path_attributes(self, tmp_path: Path):
        _write(
            tmp_path / "src" / "App.tsx",
            '<Route path="/contact" /><Route path=\'pricing\' />',
        )
        assert detect_routes(tmp_path) == ["/", "/contact", "/pricing"]

    def test_discards_wildcards_and_params(self, tmp_path: Path):
        _write(
            tmp_path / "src" / "App.tsx",
            '<Route path="/contact" /><Route path="*" /><Route path="/user/:id" />',
        )
        assert detect_routes(tmp_path) == ["/", "/contact"]

    def test_merges_sources_without_duplicates(self, react_project: Path):
        assert detect_routes(react_project) == ["/", "/about", "/contact"]

    def test_nested_route_path_is_kept_whole(self, tmp_path: Path):
        _write(tmp_path / "src" / "routes.jsx", "{ path: '/x' }, <Route path=\"/docs/intro\" />")
        assert detect_routes(tmp_path) == ["/", "/docs/intro"]

    def test_result_is_sorted(self, tmp_path: Path):
        for name in ("Zeta", "Alpha", "Mid"):
            _write(tmp_path / "src" / "pages" / f"{name}.tsx")
        routes = detect_routes(tmp_path)
        assert routes == sorted(routes)

    def test_unreadable_entry_file_is_skipped(self, tmp_path: Path):
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "App.tsx").write_bytes(b"\xff\xfe\x00bad")
        _write(tmp_path / "src" / "pages" / "About.tsx")
        assert detect_routes(tmp_path) == ["/", "/about"]


# ---------------------------------------------------------------------------
# detect_framework / analyze_project
# ---------------------------------------------------------------------------


class TestDetectFramework:
    def test_react(self):
        info = detect_framework(Manifest.from_dict({"dependencies": {"react": "^18"}}))
        assert info.uses_react
        assert not info.uses_preact

    def test_react_plugin_in_dev_dependencies(self):
        info = detect_framework(
            Manifest.from_dict({"devDependencies": {"@vitejs/plugin-react-swc": "^3"}})
        )
        assert info.uses_react

    def test_preact(self):
        info = detect_framework(Manifest.from_dict({"dependencies": {"preact": "^10"}}))
        assert info.uses_preact

    def test_neither(self):
        info = detect_framework(Manifest.from_dict({"dependencies": {"vue": "^3"}}))
        assert not info.uses_react
        assert not info.uses_preact


class TestAnalyzeProject:
    def test_descriptor(self, react_project: Path):
        manifest = Manifest.from_dict({"name": "demo-shop"})
        project = analyze_project(react_project, manifest)
        assert project.root == react_project.resolve()
        assert project.manifest is manifest
        assert project.routes == ["/", "/about", "/contact"]
        assert project.has_components_dir is False

    def test_unknown_framework_still_proceeds(self, tmp_path: Path):
        project = analyze_project(tmp_path, Manifest.from_dict({}))
        assert project.routes == ["/"]


# ---------------------------------------------------------------------------
# detect_mount_element_id
# ---------------------------------------------------------------------------


class TestDetectMountElementId:
    @pytest.mark.parametrize(
        "html, expected",
        [
            ('<div id="root"></div>', "root"),
            ("<div class='x' id='app'></div>", "app"),
            ('<div id="sidebar"></div><div id="main"></div>', "main"),
            ('<div id="portal-target"></div>', "portal-target"),
            ("<body><p>no divs</p></body>", "root"),
            ("", "root"),
            (None, "root"),
        ],
    )
    def test_fallbacks(self, html, expected):
        assert detect_mount_element_id(html) == expected
