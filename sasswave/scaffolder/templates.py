"""Jinja2 template rendering for the SassWave post-processors.

Provides the ``TemplateRenderer`` class, which loads ``.j2`` templates shipped
under ``sasswave/scaffolder/templates/``, and the content functions the
post-processors call.  The content functions are deterministic: their output
depends only on their arguments and the packaged templates, never on the
project tree being customised.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"

PRODUCT_NAME = "SassWave"
PRODUCT_TITLE = "SassWave UI"
PRODUCT_DESCRIPTION = "Generated by SassWave"

FAVICON_FILE = "favicon.png"
WORDMARK_FILE = "wordmark.png"

LINKS: dict[str, str] = {
    "components": "https://sasswave.in/components/",
    "docs": "https://sasswave.in/docs/",
    "get_started": "https://sasswave.in/docs/get-started/installation/",
}

SCENE_IMPORT = "import ThreeScene from './ThreeScene';"

SCENE_SECTION = """
        <section className={styles.scene} aria-label="Interactive 3D preview">
          <ThreeScene />
        </section>
"""


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders the packaged Jinja2 templates.

    Templates are rendered with ``StrictUndefined`` so a missing context key
    fails loudly instead of silently producing an empty string inside a
    generated source file.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, template_path: str, context: dict[str, Any] | None = None) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"next/layout.j2"``).
            context: Variables available inside the template.  The product
                name, title and links are always available.
        """
        template = self.env.get_template(template_path)
        return template.render(**{**_base_context(), **(context or {})})

    def list_templates(self, prefix: str = "") -> list[str]:
        """Return a sorted list of all ``.j2`` template paths under *prefix*."""
        search_dir = self.template_dir / prefix if prefix else self.template_dir
        if not search_dir.is_dir():
            return []
        return sorted(
            p.relative_to(self.template_dir).as_posix()
            for p in search_dir.rglob("*.j2")
        )


@lru_cache(maxsize=1)
def _renderer() -> TemplateRenderer:
    return TemplateRenderer()


def _base_context() -> dict[str, Any]:
    return {
        "product": PRODUCT_NAME,
        "title": PRODUCT_TITLE,
        "description": PRODUCT_DESCRIPTION,
        "wordmark": WORDMARK_FILE,
        "links": LINKS,
    }


# ---------------------------------------------------------------------------
# Stylesheets
# ---------------------------------------------------------------------------


def globals_stylesheet(*, paragraph_links: bool = False) -> str:
    """Global stylesheet: font face, design tokens, reset and base typography.

    ``paragraph_links`` adds the Next.js variant's link styling inside
    paragraphs (hover/focus colors derived with ``color.adjust``).
    """
    return _renderer().render(
        "styles/globals.scss.j2", {"paragraph_links": paragraph_links}
    )


def page_stylesheet() -> str:
    """Page/component-scoped stylesheet shared by the React and Next.js pages."""
    return _renderer().render("styles/page.module.scss.j2")


def scene_stylesheet() -> str:
    """``.scene`` rules appended for the 3D demo (starts with a blank line)."""
    return _renderer().render("three/scene.scss.j2")


# ---------------------------------------------------------------------------
# React (Vite)
# ---------------------------------------------------------------------------


def react_app_component() -> str:
    """Root ``App`` component importing ``./App.module.scss``.

    The markup is valid for both the TypeScript and JavaScript variants.
    """
    return _renderer().render("react/App.jsx.j2")


def react_entry(app_module: str) -> str:
    """Vite entry module rendering ``App`` in strict mode with global styles.

    Args:
        app_module: File name the entry imports the root component from,
            e.g. ``"App.tsx"``.
    """
    return _renderer().render("react/main.jsx.j2", {"app_module": app_module})


# ---------------------------------------------------------------------------
# Next.js (app router)
# ---------------------------------------------------------------------------


def next_layout(*, typescript: bool) -> str:
    """Root layout exporting page metadata.

    Never carries a client-boundary directive: Next.js rejects ``metadata``
    exports from client components.
    """
    return _renderer().render("next/layout.j2", {"typescript": typescript})


def next_page(*, use_client: bool = True) -> str:
    """Home page with header, hero and footer, importing ``./page.module.scss``."""
    return _renderer().render("next/page.j2", {"use_client": use_client})


# ---------------------------------------------------------------------------
# 3D demo
# ---------------------------------------------------------------------------


def three_scene(*, use_client: bool) -> str:
    """``ThreeScene`` component: lights, a unit cube and orbit controls."""
    return _renderer().render("three/ThreeScene.j2", {"use_client": use_client})
