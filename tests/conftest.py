"""Shared pytest fixtures for the SEO bootstrap test suite.

Provides reusable fixtures for:
- Minimal React and Preact Vite project trees
- Zip archives built from those trees (flat or wrapped in a folder)
- Default run settings
- Mock subprocess helpers
"""

from __future__ import annotations

import json
import textwrap
import zipfile
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from seo_bootstrap.config import Settings


# ---------------------------------------------------------------------------
# Project file contents
# ---------------------------------------------------------------------------

REACT_PACKAGE_JSON: dict[str, Any] = {
    "name": "demo-shop",
    "private": True,
    "version": "0.0.0",
    "type": "module",
    "scripts": {
        "dev": "vite",
        "build": "tsc && vite build",
        "preview": "vite preview",
    },
    "dependencies": {
        "react": "^18.2.0",
        "react-dom": "^18.2.0",
    },
    "devDependencies": {
        "@vitejs/plugin-react": "^4.0.0",
        "typescript": "^5.0.2",
        "vite": "^4.4.5",
    },
}

INDEX_HTML = textwrap.dedent("""\
    <!doctype html>
    <html lang="en">
      <head>
        <meta charset="UTF-8" />
        <title>Demo Shop</title>
      </head>
      <body>
        <div id="root"></div>
        <script type="module" src="/src/main.tsx"></script>
      </body>
    </html>
""")

VITE_CONFIG_TS = textwrap.dedent("""\
    import { defineConfig } from 'vite'
    import react from '@vitejs/plugin-react'

    export default defineConfig({
      plugins: [react()],
    })
""")

MAIN_TSX = textwrap.dedent("""\
    import React from 'react'
    import ReactDOM from 'react-dom/client'
    import App from './App'

    ReactDOM.createRoot(document.getElementById('root')!).render(<App />)
""")

APP_TSX = textwrap.dedent("""\
    import { Routes, Route } from 'react-router-dom'

    export default function App() {
      return (
        <Routes>
          <Route path="/" element={<Index />} />
          <Route path="/contact" element={<Contact />} />
          <Route path="/product/:id" element={<Product />} />
          <Route path="*" element={<NotFound />} />
        </Routes>
      )
    }
""")


def write_project(root: Path, package_json: dict[str, Any] | None = None) -> Path:
    """Write a small React + Vite project under *root*."""
    root.mkdir(parents=True, exist_ok=True)
    (root / "package.json").write_text(
        json.dumps(package_json or REACT_PACKAGE_JSON, indent=2), encoding="utf-8"
    )
    (root / "index.html").write_text(INDEX_HTML, encoding="utf-8")
    (root / "vite.config.ts").write_text(VITE_CONFIG_TS, encoding="utf-8")
    src = root / "src"
    (src / "pages").mkdir(parents=True, exist_ok=True)
    (src / "main.tsx").write_text(MAIN_TSX, encoding="utf-8")
    (src / "App.tsx").write_text(APP_TSX, encoding="utf-8")
    (src / "pages" / "Index.tsx").write_text("export default () => null\n", encoding="utf-8")
    (src / "pages" / "About.tsx").write_text("export default () => null\n", encoding="utf-8")
    return root


def zip_tree(source: Path, archive: Path, wrap: str | None = None) -> Path:
    """Zip every file under *source*, optionally inside a *wrap* folder."""
    with zipfile.ZipFile(archive, "w", zipfile.ZIP_DEFLATED) as zf:
        for path in sorted(p for p in source.rglob("*") if p.is_file()):
            rel = path.relative_to(source).as_posix()
            zf.write(path, f"{wrap}/{rel}" if wrap else rel)
    return archive


# ---------------------------------------------------------------------------
# Projects & Archives
# ---------------------------------------------------------------------------

@pytest.fixture
def react_project(tmp_path: Path) -> Path:
    """A React + Vite project with pages, routes and a vite.config.ts."""
    return write_project(tmp_path / "demo-shop")


@pytest.fixture
def bare_project(tmp_path: Path) -> Path:
    """A project with only a package.json: no config, no index.html."""
    root = tmp_path / "bare"
    root.mkdir()
    (root / "package.json").write_text(json.dumps({"name": "bare"}), encoding="utf-8")
    return root


@pytest.fixture
def project_zip(tmp_path: Path) -> Path:
    """A zip whose entries are wrapped in a single ``demo-shop/`` folder."""
    source = write_project(tmp_path / "zip-source")
    return zip_tree(source, tmp_path / "demo-shop.zip", wrap="demo-shop")


@pytest.fixture
def flat_project_zip(tmp_path: Path) -> Path:
    """A zip with ``package.json`` at the archive root."""
    source = write_project(tmp_path / "zip-source-flat")
    return zip_tree(source, tmp_path / "flat.zip")


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

@pytest.fixture
def settings() -> Settings:
    """Default run settings with a recognisable domain."""
    return Settings(domain="https://shop.example.org/")


@pytest.fixture
def isolated_tempdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Redirect :mod:`tempfile` so working directories land in a known place."""
    import tempfile

    scratch = tmp_path / "scratch"
    scratch.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(scratch))
    return scratch


# ---------------------------------------------------------------------------
# Mock Subprocess (generic)
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory


# ---------------------------------------------------------------------------
# Strategy context
# ---------------------------------------------------------------------------

@pytest.fixture
def make_context(settings: Settings):
    """Factory fixture: analyze a project root and wrap it in a StrategyContext.

    The manifest is re-read from disk on every call, so calling it twice
    models two independent runs over the same tree.
    """
    from seo_bootstrap.analyzer import analyze_project
    from seo_bootstrap.strategies import StrategyContext
    from seo_bootstrap.transform import load_manifest

    def factory(root: Path, run_settings: Settings | None = None) -> StrategyContext:
        project = analyze_project(root, load_manifest(root))
        return StrategyContext(project=project, settings=run_settings or settings)

    return factory


def snapshot_tree(root: Path) -> dict[str, bytes]:
    """Map every file under *root* (relative posix path) to its bytes."""
    return {
        p.relative_to(root).as_posix(): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


@pytest.fixture
def snapshot():
    """Factory fixture: ``snapshot(root) -> {path: bytes}``."""
    return snapshot_tree
