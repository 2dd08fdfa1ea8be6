"""Optional three.js demo for React and Next.js projects.

Installs the rendering packages, writes a ``ThreeScene`` component next to
the page the post-processors produced, and wires it in.  Every edit checks for
its own marker first, so running the injector again leaves the import, the
scene section and the ``.scene`` rules as they are.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..config import Config
from ..models import Answers
from ..utils import CommandError, ExecEnv, log, relative_to, run_checked, write_file
from . import templates
from .generator import install_command
from .paths import NEXT_PAGE_CANDIDATES, REACT_APP_CANDIDATES, find_existing

THREE_PACKAGES: list[str] = ["three", "@react-three/fiber", "@react-three/drei"]

_CLIENT_DIRECTIVES = ('"use client";', "'use client';")


@dataclass(frozen=True)
class SceneTarget:
    """Where the demo goes for one framework."""

    entry: Path
    scene: Path
    stylesheet: Path
    use_client: bool


# ---------------------------------------------------------------------------
# Idempotent content edits
# ---------------------------------------------------------------------------


def insert_import(content: str, import_line: str) -> str:
    """Add *import_line* once, below a leading client directive if present."""
    if import_line in content:
        return content

    if content.startswith(_CLIENT_DIRECTIVES):
        newline = content.find("\n")
        if newline == -1:
            return f"{content}\n{import_line}\n"
        return content[: newline + 1] + import_line + "\n" + content[newline + 1 :]

    return f"{import_line}\n{content}"


def insert_scene_section(content: str) -> str:
    """Place the scene section before the first ``<footer``, else at the end."""
    if "<ThreeScene" in content:
        return content

    footer_index = content.find("<footer")
    if footer_index == -1:
        return content + templates.SCENE_SECTION
    return content[:footer_index] + templates.SCENE_SECTION + content[footer_index:]


def ensure_scene_styles(stylesheet: Path) -> bool:
    """Append the ``.scene`` rules unless the stylesheet already has them."""
    if not stylesheet.exists():
        return False

    styles = stylesheet.read_text(encoding="utf-8")
    if ".scene" in styles:
        return False

    stylesheet.write_text(f"{styles}\n{templates.scene_stylesheet()}", encoding="utf-8")
    return True


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------


async def install_three_dependencies(
    answers: Answers,
    project_dir: Path,
    config: Config,
    env: ExecEnv | None = None,
) -> bool:
    """Install the three.js packages unless ``config.skip_three_install``."""
    if config.skip_three_install:
        log("Skipping 3D package install (skip_three_install is set)")
        return False

    log(f"Installing 3D packages: {', '.join(THREE_PACKAGES)}")
    await run_checked(
        install_command(answers.pkg_manager, THREE_PACKAGES),
        cwd=project_dir,
        env=env,
    )
    return True


def scene_target(answers: Answers, project_dir: Path) -> SceneTarget | None:
    """Locate the page that receives the demo, or ``None`` if it is missing."""
    extension = "tsx" if answers.is_typescript else "jsx"

    if answers.framework == "react":
        entry = find_existing(project_dir, REACT_APP_CANDIDATES[answers.variant])
        if entry is None:
            return None
        src_dir = project_dir / "src"
        return SceneTarget(
            entry=entry,
            scene=src_dir / f"ThreeScene.{extension}",
            stylesheet=src_dir / "App.module.scss",
            use_client=False,
        )

    if answers.framework == "next.js":
        app_dir = project_dir / "src" / "app"
        entry = find_existing(app_dir, NEXT_PAGE_CANDIDATES[answers.variant])
        if entry is None:
            return None
        return SceneTarget(
            entry=entry,
            scene=app_dir / f"ThreeScene.{extension}",
            stylesheet=app_dir / "page.module.scss",
            use_client=True,
        )

    return None


def inject_scene(answers: Answers, project_dir: Path) -> bool:
    """Write the scene component and wire it into the page and stylesheet."""
    target = scene_target(answers, project_dir)
    if target is None:
        log("No page or App component found; skipping 3D scene injection")
        return False

    write_file(target.scene, templates.three_scene(use_client=target.use_client))
    log(f"Wrote ThreeScene example to {relative_to(target.scene, project_dir)}")

    content = target.entry.read_text(encoding="utf-8")
    updated = insert_scene_section(insert_import(content, templates.SCENE_IMPORT))
    if updated != content:
        target.entry.write_text(updated, encoding="utf-8")

    ensure_scene_styles(target.stylesheet)
    return True


async def setup_react_three(
    answers: Answers,
    project_dir: str | Path,
    config: Config | None = None,
    env: ExecEnv | None = None,
) -> None:
    """Install three.js packages and inject the demo scene when requested.

    A failed install is logged and re-raised: the demo cannot work without the
    packages.  Failures while wiring the scene are logged and swallowed, since
    a project without the demo is still usable.
    """
    if not answers.want3d:
        return

    config = config or Config()
    root = Path(project_dir)

    try:
        await install_three_dependencies(answers, root, config, env)
    except (CommandError, FileNotFoundError) as exc:
        log(f"Failed to install 3D packages: {exc}")
        raise

    try:
        inject_scene(answers, root)
    except Exception as exc:  # noqa: BLE001
        log(f"Failed to configure 3D scene: {exc}")
