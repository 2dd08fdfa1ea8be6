"""Shared pytest fixtures for the SassWave Create test suite.

Provides reusable fixtures for:
- Vite React and Next.js project trees shaped like fresh generator output
- Answer records for both frameworks
- A configuration that never touches the network or installs packages
- An ``httpx.MockTransport`` serving asset downloads
"""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest

from sasswave.config import Config
from sasswave.models import Answers


# ---------------------------------------------------------------------------
# Generated project trees
# ---------------------------------------------------------------------------

VITE_MAIN_TSX = (
    "import React from 'react';\n"
    "import ReactDOM from 'react-dom/client';\n"
    "import App from './App';\n"
    "import './index.css';\n"
    "ReactDOM.createRoot(document.getElementById('root')!).render(<App />);\n"
)

VITE_INDEX_HTML = (
    "<!doctype html>\n"
    "<html>\n"
    "  <head>\n"
    '    <link rel="icon" href="/vite.svg" />\n'
    "    <title>Vite App</title>\n"
    "  </head>\n"
    "  <body>\n"
    '    <div id="root"></div>\n'
    "  </body>\n"
    "</html>\n"
)


def make_react_tree(root: Path, *, typescript: bool = True) -> Path:
    """Write a minimal ``create-vite`` output tree under *root*."""
    ext = "tsx" if typescript else "jsx"
    (root / "src" / "assets").mkdir(parents=True, exist_ok=True)
    (root / "public").mkdir(parents=True, exist_ok=True)

    (root / "src" / f"App.{ext}").write_text(
        "export default function App(){return <div>Hello</div>;}\n", encoding="utf-8"
    )
    (root / "src" / "App.css").write_text("body { background: pink; }\n", encoding="utf-8")
    (root / "src" / "index.css").write_text(":root { color: red; }\n", encoding="utf-8")
    (root / "src" / f"main.{ext}").write_text(VITE_MAIN_TSX, encoding="utf-8")
    (root / "src" / "assets" / "react.svg").write_text("<svg/>", encoding="utf-8")
    (root / "public" / "vite.svg").write_text("<svg/>", encoding="utf-8")
    (root / "index.html").write_text(VITE_INDEX_HTML, encoding="utf-8")
    return root


def make_next_tree(root: Path, *, typescript: bool = True) -> Path:
    """Write a minimal ``create-next-app`` output tree (with Tailwind) under *root*."""
    ext = "tsx" if typescript else "js"
    app_dir = root / "src" / "app"
    app_dir.mkdir(parents=True, exist_ok=True)
    (root / "public").mkdir(parents=True, exist_ok=True)

    (app_dir / f"layout.{ext}").write_text(
        "import './globals.css';\n"
        "export default function RootLayout({ children }) {\n"
        "  return (\n"
        '    <html lang="en">\n'
        "      <body>{children}</body>\n"
        "    </html>\n"
        "  );\n"
        "}\n",
        encoding="utf-8",
    )
    (app_dir / f"page.{ext}").write_text(
        "export default function Page(){ return <main>Hello</main>; }\n", encoding="utf-8"
    )
    (app_dir / "globals.css").write_text("body { background: #fff; }\n", encoding="utf-8")
    (app_dir / "page.module.css").write_text(".main { padding: 2rem; }\n", encoding="utf-8")
    (root / "public" / "next.svg").write_text("<svg/>", encoding="utf-8")

    (root / "tailwind.config.js").write_text("export default {};\n", encoding="utf-8")
    (root / "postcss.config.js").write_text("export default {};\n", encoding="utf-8")
    (root / "package.json").write_text(
        json.dumps(
            {
                "name": "fixture",
                "dependencies": {"next": "15.0.0", "tailwindcss": "^3.0.0"},
                "devDependencies": {"@tailwindcss/postcss": "^8.0.0", "eslint": "^9"},
            },
            indent=2,
        ),
        encoding="utf-8",
    )
    return root


@pytest.fixture
def react_project(tmp_path: Path) -> Path:
    """A TypeScript Vite React tree."""
    return make_react_tree(tmp_path / "react-app")


@pytest.fixture
def next_project(tmp_path: Path) -> Path:
    """A TypeScript Next.js tree still carrying Tailwind."""
    return make_next_tree(tmp_path / "next-app")


# ---------------------------------------------------------------------------
# Answers & configuration
# ---------------------------------------------------------------------------


@pytest.fixture
def react_answers() -> Answers:
    return Answers(framework="react", language="TypeScript", pkg_manager="npm")


@pytest.fixture
def next_answers() -> Answers:
    return Answers(framework="next.js", language="TypeScript", pkg_manager="npm")


@pytest.fixture
def offline_config(tmp_path: Path) -> Config:
    """Config with no asset manifest and no three.js install."""
    return Config(
        manifest_path=tmp_path / "no-such-manifest.json",
        skip_three_install=True,
    )


@pytest.fixture
def write_manifest(tmp_path: Path):
    """Factory writing a manifest file and returning a Config pointing at it."""

    def _write(entries, *, raw: str | None = None, **config_kwargs) -> Config:
        path = tmp_path / "assets-manifest.json"
        path.write_text(raw if raw is not None else json.dumps(entries), encoding="utf-8")
        return Config(manifest_path=path, skip_three_install=True, **config_kwargs)

    return _write


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------


@pytest.fixture
def asset_server():
    """``httpx.MockTransport`` serving ``/files/<name>`` and recording requests.

    Paths under ``/redirect/<n>/<name>`` answer with ``302`` chains of length
    ``n`` ending at ``/files/<name>``; ``/missing/...`` answers ``404``.
    """
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        parts = request.url.path.strip("/").split("/")
        if parts[0] == "files":
            return httpx.Response(200, content=f"payload:{parts[-1]}".encode())
        if parts[0] == "redirect":
            remaining = int(parts[1])
            name = parts[-1]
            location = (
                f"/redirect/{remaining - 1}/{name}" if remaining > 1 else f"/files/{name}"
            )
            return httpx.Response(302, headers={"Location": location})
        return httpx.Response(404)

    transport = httpx.MockTransport(handler)
    transport.requests = requests  # type: ignore[attr-defined]
    return transport


@pytest.fixture
def react_tree():
    """Factory: ``react_tree(root, typescript=...)`` writes a Vite tree."""
    return make_react_tree


@pytest.fixture
def next_tree():
    """Factory: ``next_tree(root, typescript=...)`` writes a Next.js tree."""
    return make_next_tree
