"""SassWave scaffolder -- post-processing of freshly generated projects.

This package runs the upstream generators and then rewrites the generated
tree: SCSS-first styling for Vite React and Next.js, removal of the default
Tailwind setup, remote asset downloads and an optional three.js demo.

Quick usage::

    from sasswave.models import Answers
    from sasswave.scaffolder import setup_react_project

    answers = Answers(framework="react", language="TypeScript", pkg_manager="npm")
    await setup_react_project(answers, "/tmp/my-app")
"""

from sasswave.scaffolder.assets import AssetDownloadError, download_assets, load_asset_manifest
from sasswave.scaffolder.generator import ScaffoldError, init_git, install_sass, scaffold_project
from sasswave.scaffolder.next_setup import setup_next_project
from sasswave.scaffolder.paths import find_existing, resolve_candidate
from sasswave.scaffolder.react_setup import setup_react_project
from sasswave.scaffolder.templates import TemplateRenderer
from sasswave.scaffolder.three_setup import setup_react_three

__all__ = [
    "AssetDownloadError",
    "ScaffoldError",
    "TemplateRenderer",
    "download_assets",
    "find_existing",
    "init_git",
    "install_sass",
    "load_asset_manifest",
    "resolve_candidate",
    "scaffold_project",
    "setup_next_project",
    "setup_react_project",
    "setup_react_three",
]
