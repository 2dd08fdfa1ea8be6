"""SassWave defaults for projects generated by ``create-next-app``.

Removes the Tailwind/PostCSS footprint the generator may leave behind, then
replaces the app-router layout and home page with SCSS-module based ones.
"""

from __future__ import annotations

from pathlib import Path

import httpx

from ..config import Config
from ..models import Answers
from ..utils import ensure_dir, load_json, log, remove_if_exists, save_json, write_file
from . import templates
from .assets import download_assets
from .paths import NEXT_LAYOUT_CANDIDATES, NEXT_PAGE_CANDIDATES, resolve_candidate

APP_DIR = Path("src") / "app"

TAILWIND_ARTIFACTS: list[str] = [
    "tailwind.config.js",
    "tailwind.config.cjs",
    "tailwind.config.mjs",
    "tailwind.config.ts",
    "postcss.config.js",
    "postcss.config.cjs",
    "postcss.config.mjs",
    "src/app/globals.css",
    "src/app/globals.scss",
    "src/app/page.module.css",
    "public/file.svg",
    "public/globe.svg",
    "public/next.svg",
    "public/vercel.svg",
    "public/window.svg",
]

TAILWIND_DEPENDENCIES: tuple[str, ...] = ("tailwindcss", "@tailwindcss/postcss")
DEPENDENCY_SECTIONS: tuple[str, ...] = ("dependencies", "devDependencies")


def strip_tailwind_dependencies(package: dict) -> list[tuple[str, str]]:
    """Remove Tailwind packages from *package* in place.

    Returns a ``(section, name)`` pair for every removed dependency.
    """
    removed: list[tuple[str, str]] = []
    for section in DEPENDENCY_SECTIONS:
        deps = package.get(section)
        if not isinstance(deps, dict):
            continue
        for dep in TAILWIND_DEPENDENCIES:
            if dep in deps:
                del deps[dep]
                removed.append((section, dep))
    return removed


def remove_tailwind_artifacts(project_dir: Path) -> None:
    """Delete Tailwind config/starter files and scrub ``package.json``."""
    for rel in TAILWIND_ARTIFACTS:
        if remove_if_exists(project_dir / rel):
            log(f"Removed Tailwind file: {rel}")

    pkg_path = project_dir / "package.json"
    if not pkg_path.exists():
        return

    package = load_json(pkg_path)
    if not isinstance(package, dict):
        return

    removed = strip_tailwind_dependencies(package)
    for section, dep in removed:
        log(f"Removed Tailwind dependency: {dep} from {section}")

    if removed:
        save_json(package, pkg_path)


async def setup_next_project(
    answers: Answers,
    project_dir: str | Path,
    config: Config | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> None:
    """Apply SassWave defaults to a freshly created Next.js app.

    No-op unless ``answers.framework == "next.js"``.
    """
    if answers.framework != "next.js":
        return

    root = Path(project_dir)
    remove_tailwind_artifacts(root)
    app_dir = ensure_dir(root / APP_DIR)

    layout_path = resolve_candidate(app_dir, NEXT_LAYOUT_CANDIDATES[answers.variant])
    page_path = resolve_candidate(app_dir, NEXT_PAGE_CANDIDATES[answers.variant])

    write_file(app_dir / "globals.scss", templates.globals_stylesheet(paragraph_links=True))
    write_file(app_dir / "page.module.scss", templates.page_stylesheet())
    write_file(layout_path, templates.next_layout(typescript=answers.is_typescript))
    write_file(page_path, templates.next_page(use_client=True))

    log("Rebuilt Next.js entry files (layout & page) with SassWave defaults")
    await download_assets(answers, root, config, transport=transport)
