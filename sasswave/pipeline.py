"""SassWave Create pipeline orchestrator.

Runs the scaffold in four phases:

Phase 1: SCAFFOLD -- Ensure the package manager, run the upstream generator.
Phase 2: STYLE    -- Install ``sass``, apply the framework post-processor
                     (which also downloads the manifest assets).
Phase 3: THREE    -- Optional three.js packages and demo scene.
Phase 4: GIT      -- Best-effort ``git init``.

Usage::

    sasswave-create
    sasswave-create my-app --framework next.js --language TypeScript --yes
    python -m sasswave.pipeline my-app --framework react --no-3d
"""

from __future__ import annotations

import asyncio
import sys
import time
import traceback
from pathlib import Path
from typing import Any, Awaitable

from pydantic import ValidationError
from rich.markup import escape
from rich.panel import Panel

from sasswave.config import Config
from sasswave.models import Answers
from sasswave.scaffolder.generator import (
    ScaffoldError,
    dev_server_command,
    ensure_bun_installed,
    init_git,
    install_sass,
    scaffold_project,
    start_dev_server,
)
from sasswave.scaffolder.next_setup import setup_next_project
from sasswave.scaffolder.react_setup import setup_react_project
from sasswave.scaffolder.three_setup import setup_react_three
from sasswave.utils import (
    PHASE_NAMES,
    CommandError,
    ExecEnv,
    console,
    format_duration,
    log,
    print_error,
    print_phase_header,
    print_success,
    print_summary_table,
    print_warning,
)

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class PipelineError(Exception):
    """Raised when a pipeline phase fails irrecoverably."""

    def __init__(self, phase: int, message: str) -> None:
        self.phase = phase
        super().__init__(f"Phase {phase} ({PHASE_NAMES.get(phase, '?')}): {message}")


# ---------------------------------------------------------------------------
# Pipeline Orchestrator
# ---------------------------------------------------------------------------


class Pipeline:
    """Drives one scaffold from generator invocation to ``git init``.

    Attributes:
        config: Run configuration.
        env: Execution environment for child processes; replaced when bun has
            to be installed during this run.
        state: Results accumulated by the phases.
    """

    _PHASE_METHODS: dict[int, str] = {
        1: "phase1_scaffold",
        2: "phase2_style",
        3: "phase3_three",
        4: "phase4_git",
    }

    def __init__(self, config: Config | None = None, env: ExecEnv | None = None) -> None:
        self.config = config or Config()
        self.env = env or ExecEnv()
        self.state: dict[str, Any] = {
            "phases_completed": [],
            "phases_failed": [],
            "warnings": [],
            "success": False,
        }
        self.project_dir: Path | None = None

    async def run(self, answers: Answers, cwd: str | Path) -> dict[str, Any]:
        """Execute every phase in order, stopping at the first fatal failure.

        Returns:
            The final state dictionary, including a top-level ``success``
            boolean and, once phase 1 has run, ``project_dir``.
        """
        pipeline_start = time.monotonic()

        console.print(
            Panel(
                f"[bold bright_cyan]SassWave Create[/bold bright_cyan]\n"
                f"Project   : {answers.name}\n"
                f"Framework : {answers.framework} ({answers.language})\n"
                f"Packages  : {answers.pkg_manager}",
                title="[bold]Scaffold Start[/bold]",
                border_style="bright_cyan",
            )
        )

        all_success = True

        for phase_num in sorted(self._PHASE_METHODS):
            phase_name = PHASE_NAMES[phase_num]
            print_phase_header(phase_num, phase_name)

            phase_start = time.monotonic()
            try:
                method = getattr(self, self._PHASE_METHODS[phase_num])
                if phase_num == 1:
                    result = await method(answers, cwd)
                else:
                    result = await method(answers)

                elapsed = time.monotonic() - phase_start
                self.state[f"phase{phase_num}"] = result
                self.state["phases_completed"].append(phase_num)
                print_success(
                    f"Phase {phase_num} ({phase_name}) completed in {format_duration(elapsed)}"
                )

            except PipelineError as exc:
                all_success = False
                self.state["phases_failed"].append(phase_num)
                self.state["error"] = str(exc)
                print_error(str(exc))
                # Later phases need the project the failed phase was building.
                break

            except Exception as exc:
                all_success = False
                self.state["phases_failed"].append(phase_num)
                self.state["error"] = f"Phase {phase_num} ({phase_name}): {exc}"
                print_error(
                    f"Phase {phase_num} ({phase_name}) FAILED after "
                    f"{format_duration(time.monotonic() - phase_start)}: {exc}"
                )
                console.print(f"[dim]{escape(traceback.format_exc())}[/dim]")
                break

        self.state["success"] = all_success
        self.state["total_duration"] = format_duration(time.monotonic() - pipeline_start)
        if self.project_dir is not None:
            self.state["project_dir"] = str(self.project_dir)
        return self.state

    # ------------------------------------------------------------------
    # Phase 1: SCAFFOLD
    # ------------------------------------------------------------------

    async def phase1_scaffold(self, answers: Answers, cwd: str | Path) -> dict[str, Any]:
        """Make sure the package manager exists, then run the generator."""
        if answers.pkg_manager == "bun":
            try:
                self.env = await ensure_bun_installed(self.env)
            except (CommandError, FileNotFoundError) as exc:
                raise PipelineError(1, f"Failed to install Bun automatically: {exc}") from exc

        try:
            self.project_dir = await scaffold_project(answers, cwd, self.env)
        except ScaffoldError as exc:
            raise PipelineError(1, str(exc)) from exc

        return {"project_dir": str(self.project_dir)}

    # ------------------------------------------------------------------
    # Phase 2: STYLE
    # ------------------------------------------------------------------

    async def phase2_style(self, answers: Answers) -> dict[str, Any]:
        """Install ``sass`` and apply the framework post-processor.

        A post-processor failure leaves a working, partially customised
        project, so it is reported as a warning rather than failing the run.
        """
        project_dir = self._require_project_dir(2)

        try:
            await install_sass(answers, project_dir, self.env)
        except (CommandError, FileNotFoundError) as exc:
            raise PipelineError(2, f"Failed to install sass: {exc}") from exc

        customised = True
        if answers.framework == "next.js":
            customised = await self._isolated(
                "Failed to finalize Next.js project automatically",
                setup_next_project(answers, project_dir, self.config),
            )
        elif answers.framework == "react":
            customised = await self._isolated(
                "Failed to finalize React project automatically",
                setup_react_project(answers, project_dir, self.config),
            )

        return {"customised": customised}

    # ------------------------------------------------------------------
    # Phase 3: THREE
    # ------------------------------------------------------------------

    async def phase3_three(self, answers: Answers) -> dict[str, Any]:
        """Install three.js and inject the demo scene when requested."""
        if not answers.want3d:
            console.print("  [dim]3D setup not requested -- skipping.[/dim]")
            return {"skipped": True}

        project_dir = self._require_project_dir(3)
        try:
            await setup_react_three(answers, project_dir, self.config, self.env)
        except (CommandError, FileNotFoundError) as exc:
            raise PipelineError(3, f"Failed to install 3D packages: {exc}") from exc
        return {"skipped": False}

    # ------------------------------------------------------------------
    # Phase 4: GIT
    # ------------------------------------------------------------------

    async def phase4_git(self, answers: Answers) -> dict[str, Any]:
        """Initialise a git repository; never fatal."""
        if not answers.git:
            console.print("  [dim]Git initialisation not requested -- skipping.[/dim]")
            return {"initialized": False}

        project_dir = self._require_project_dir(4)
        initialized = await init_git(answers, project_dir, self.env)
        if not initialized:
            self.state["warnings"].append("git init failed")
        return {"initialized": initialized}

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_project_dir(self, phase: int) -> Path:
        if self.project_dir is None:
            raise PipelineError(phase, "No project directory (run the SCAFFOLD phase first)")
        return self.project_dir

    async def _isolated(self, label: str, step: Awaitable[None]) -> bool:
        """Await *step*; log and record any exception instead of raising it."""
        try:
            await step
        except Exception as exc:  # noqa: BLE001
            log(f"{label}: {exc}")
            self.state["warnings"].append(f"{label}: {exc}")
            return False
        return True

    def print_next_steps(self, answers: Answers) -> None:
        """Print the ``cd`` / dev-server hint shown after a successful run."""
        print_summary_table(
            {
                "Project": str(self.project_dir or answers.name),
                "Framework": f"{answers.framework} ({answers.language})",
                "Warnings": str(len(self.state["warnings"])),
                "Duration": self.state.get("total_duration", "?"),
            },
            title="Scaffold Results",
        )
        console.print("[bold green]All set! Next steps:[/bold green]")
        console.print(f"  [cyan]cd[/cyan] [magenta]{answers.name}[/magenta]")
        console.print(f"  [cyan]{' '.join(dev_server_command(answers.pkg_manager))}[/cyan]")


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def _build_parser():
    import argparse

    parser = argparse.ArgumentParser(
        prog="sasswave-create",
        description="SassWave Create -- scaffold a SassWave-ready React or Next.js project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  sasswave-create\n"
            "  sasswave-create my-app --framework next.js --language TypeScript --yes\n"
            "  sasswave-create my-app --framework react --pkg-manager bun --3d\n"
        ),
    )
    parser.add_argument("name", nargs="?", default=None, help="Project directory name")
    parser.add_argument("--framework", choices=["react", "next.js"], default=None)
    parser.add_argument("--language", choices=["JavaScript", "TypeScript"], default=None)
    parser.add_argument(
        "--pkg-manager",
        dest="pkg_manager",
        choices=["npm", "bun", "yarn", "pnpm"],
        default=None,
    )
    parser.add_argument(
        "--git", action=argparse.BooleanOptionalAction, default=None,
        help="Initialize a git repository",
    )
    parser.add_argument(
        "--3d", dest="want3d", action=argparse.BooleanOptionalAction, default=None,
        help="Add three.js and a demo scene",
    )
    parser.add_argument(
        "--yes", "-y", action="store_true",
        help="Accept defaults for every question not answered by a flag",
    )
    parser.add_argument(
        "--no-dev", dest="no_dev", action="store_true",
        help="Do not start the dev server when scaffolding completes",
    )
    parser.add_argument(
        "--manifest", default=None,
        help="Path to an alternative assets-manifest.json",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``sasswave-create``."""
    from sasswave.prompts import ask_questions

    args = _build_parser().parse_args(argv)

    try:
        config = Config.from_env()
    except (ValueError, ValidationError) as exc:
        print_error(f"Error: Invalid environment configuration: {exc}")
        sys.exit(1)
    if args.manifest:
        config.manifest_path = Path(args.manifest)
    if args.no_dev:
        config.start_dev_server = False

    preset = {
        "name": args.name,
        "framework": args.framework,
        "language": args.language,
        "pkg_manager": args.pkg_manager,
        "git": args.git,
        "want3d": args.want3d,
    }

    try:
        answers = ask_questions(preset, assume_defaults=args.yes)
    except ValidationError as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)
    except KeyboardInterrupt:
        sys.exit(130)

    pipeline = Pipeline(config)
    try:
        result = asyncio.run(pipeline.run(answers, Path.cwd()))
    except KeyboardInterrupt:
        print_warning("Interrupted.")
        sys.exit(130)

    if not result.get("success"):
        print_error(f"Error: {result.get('error', 'scaffold failed')}")
        sys.exit(1)

    pipeline.print_next_steps(answers)

    if config.start_dev_server and pipeline.project_dir is not None:
        try:
            asyncio.run(start_dev_server(answers, pipeline.project_dir, pipeline.env))
        except KeyboardInterrupt:
            pass


if __name__ == "__main__":
    main()
