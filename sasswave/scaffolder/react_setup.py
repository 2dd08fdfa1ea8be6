"""SassWave defaults for projects generated by ``create-vite``.

Steps run in order and share nothing but the project directory.  An
exception in one step ends the call; the orchestrator catches and logs it, so
a partially customised project is left in place.
"""

from __future__ import annotations

import re
from pathlib import Path

import httpx

from ..config import Config
from ..models import Answers
from ..utils import log, relative_to, remove_if_exists, write_file
from . import templates
from .assets import download_assets
from .paths import REACT_APP_CANDIDATES, VITE_ENTRY_CANDIDATES, find_existing, resolve_candidate

DEFAULT_REACT_FILES: list[str] = [
    "src/index.css",
    "src/App.css",
    "public/vite.svg",
    "src/assets/react.svg",
]

INDEX_HTML = "index.html"
APP_STYLESHEET = "src/App.module.scss"
GLOBAL_STYLESHEET = "src/styles.scss"

_FAVICON_PATTERN = re.compile(r"""<link[^>]+rel=["']icon["'][^>]*>""", re.IGNORECASE)
_TITLE_PATTERN = re.compile(r"<title>.*?</title>", re.IGNORECASE | re.DOTALL)

FAVICON_TAG = f'<link rel="shortcut icon" href="{templates.FAVICON_FILE}" type="image/x-icon">'
TITLE_TAG = f"<title>{templates.PRODUCT_TITLE}</title>"


def remove_default_files(project_dir: Path) -> list[str]:
    """Delete the Vite starter's stylesheets and SVGs that are present."""
    removed: list[str] = []
    for rel in DEFAULT_REACT_FILES:
        if remove_if_exists(project_dir / rel):
            removed.append(rel)
            log(f"Removed default React CSS file: {rel}")
    return removed


def ensure_scss_entry(
    project_dir: Path,
    content: str,
    app_module: str = "App.tsx",
) -> Path | None:
    """Write ``src/styles.scss`` and point the Vite entry module at it.

    The first existing entry among ``src/main.{tsx,ts,jsx,js}`` is replaced
    with a bootstrap importing *app_module* and the global stylesheet.  When no
    entry exists the stylesheet is still written and ``None`` is returned.
    """
    write_file(project_dir / GLOBAL_STYLESHEET, content)

    entry_path = find_existing(project_dir, VITE_ENTRY_CANDIDATES)
    if entry_path is None:
        log(f"Created {GLOBAL_STYLESHEET} but did not find a React entry file to rewrite")
        return None

    write_file(entry_path, templates.react_entry(app_module))
    log(f"Rewrote {relative_to(entry_path, project_dir)} with SassWave bootstrap")
    return entry_path


def rewrite_index_html(content: str) -> str:
    """Swap the favicon link and the document title; leave the rest untouched."""
    content = _FAVICON_PATTERN.sub(lambda _m: FAVICON_TAG, content, count=1)
    content = _TITLE_PATTERN.sub(lambda _m: TITLE_TAG, content, count=1)
    return content


def tweak_index_html(project_dir: Path) -> bool:
    """Apply :func:`rewrite_index_html` to ``index.html`` if it exists."""
    html_path = project_dir / INDEX_HTML
    if not html_path.exists():
        return False

    original = html_path.read_text(encoding="utf-8")
    updated = rewrite_index_html(original)
    if updated == original:
        return False

    html_path.write_text(updated, encoding="utf-8")
    log("Updated index.html with SassWave favicon and title")
    return True


async def setup_react_project(
    answers: Answers,
    project_dir: str | Path,
    config: Config | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> None:
    """Apply SassWave defaults to a freshly created Vite React app.

    No-op unless ``answers.framework == "react"``.
    """
    if answers.framework != "react":
        return

    root = Path(project_dir)
    remove_default_files(root)

    app_path = resolve_candidate(root, REACT_APP_CANDIDATES[answers.variant])
    app_path.parent.mkdir(parents=True, exist_ok=True)
    write_file(root / APP_STYLESHEET, templates.page_stylesheet())
    write_file(app_path, templates.react_app_component())

    ensure_scss_entry(root, templates.globals_stylesheet(), app_module=app_path.name)
    await download_assets(answers, root, config, transport=transport)
    tweak_index_html(root)

    log("Applied SassWave defaults to Vite React project")
