"""Upstream generator invocation and package-manager commands.

Builds the ``create-vite`` / ``create-next-app`` command lines for the chosen
framework, language and package manager, runs them with inherited stdio, and
provides the install helpers the later stages use.  Every command receives
the run's ``ExecEnv`` explicitly.
"""

from __future__ import annotations

from pathlib import Path

from ..models import Answers
from ..utils import CommandError, ExecEnv, log, print_success, print_warning, run_checked, run_command

BUN_INSTALL_SCRIPT = "curl -fsSL https://bun.sh/install | bash"


class ScaffoldError(Exception):
    """Raised when the project cannot be scaffolded."""


# ---------------------------------------------------------------------------
# Command construction
# ---------------------------------------------------------------------------


def next_generator_command(answers: Answers) -> list[str]:
    """``create-next-app`` invocation: SCSS-ready, no Tailwind, ``src/app``."""
    flags = [
        "--ts" if answers.is_typescript else "--js",
        "--eslint",
        "--tailwind", "false",
        "--src-dir", "true",
        "--app", "true",
        "--import-alias", "@/*",
        "--react-compiler", "true",
    ]
    if answers.pkg_manager == "bun":
        return ["bun", "create", "next-app", answers.name, *flags]
    runner = "npx" if answers.pkg_manager == "npm" else answers.pkg_manager
    return [runner, "create-next-app@latest", answers.name, *flags]


def vite_generator_command(answers: Answers) -> list[str]:
    """``create-vite`` invocation with the React template for the language."""
    template = "react-ts" if answers.is_typescript else "react"
    args = ["create-vite@latest", answers.name, "--template", template]
    if answers.is_typescript:
        args.append("--no-rolldown")
    # Skip the generator's "install and start now?" follow-up prompt.
    args.append("--no-interactive")

    if answers.pkg_manager == "bun":
        return ["bun", "x", *args]
    return ["npx", *args]


def generator_command(answers: Answers) -> list[str]:
    if answers.framework == "next.js":
        return next_generator_command(answers)
    if answers.framework == "react":
        return vite_generator_command(answers)
    raise ScaffoldError(f"Unsupported framework: {answers.framework}")


def install_command(pkg_manager: str, packages: list[str], *, dev: bool = False) -> list[str]:
    """Package-manager specific install command.

    ``npm install [--save-dev]``, ``yarn add [--dev]``, otherwise
    ``<pm> add [-D]``.
    """
    if pkg_manager == "npm":
        verb = ["install", "--save-dev"] if dev else ["install"]
    elif pkg_manager == "yarn":
        verb = ["add", "--dev"] if dev else ["add"]
    else:
        verb = ["add", "-D"] if dev else ["add"]
    return [pkg_manager, *verb, *packages]


def dev_server_command(pkg_manager: str) -> list[str]:
    if pkg_manager == "npm":
        return ["npm", "run", "dev"]
    return [pkg_manager, "dev"]


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------


async def ensure_bun_installed(env: ExecEnv | None = None) -> ExecEnv:
    """Make ``bun`` available for the rest of this run.

    Returns the environment to use from now on: unchanged when ``bun`` is
    already on the path, otherwise extended with ``~/.bun/bin`` after running
    the official install script.

    Raises:
        CommandError: If the install script fails.
    """
    env = env or ExecEnv()
    try:
        returncode, _, _ = await run_command(["bun", "--version"], capture=True, env=env)
    except FileNotFoundError:
        returncode = 127
    if returncode == 0:
        return env

    print_warning("Bun is not installed. Installing Bun globally...")
    await run_checked(["bash", "-c", BUN_INSTALL_SCRIPT], env=env)
    print_success("Bun installation complete. Continuing with project setup...")
    return env.with_path(Path.home() / ".bun" / "bin")


async def scaffold_project(
    answers: Answers,
    cwd: str | Path,
    env: ExecEnv | None = None,
) -> Path:
    """Run the upstream generator and return the new project directory.

    Raises:
        ScaffoldError: If the target already exists, the framework is not
            supported, or the generator fails.
    """
    project_dir = Path(cwd).absolute() / answers.name
    if project_dir.exists():
        raise ScaffoldError(
            f"Directory {project_dir} already exists. Please remove or choose another name."
        )

    command = generator_command(answers)
    log(f"Scaffolding {answers.name} with {answers.framework}")
    log(f"Running {' '.join(command)}")
    try:
        await run_checked(command, cwd=cwd, env=env)
    except (CommandError, FileNotFoundError) as exc:
        raise ScaffoldError(f"Project generator failed: {exc}") from exc

    return project_dir


async def install_sass(answers: Answers, project_dir: Path, env: ExecEnv | None = None) -> None:
    """Add ``sass`` as a dev dependency of the generated project.

    Raises:
        CommandError: If the package manager exits with a non-zero status.
    """
    log("Installing SCSS support (sass) ...")
    try:
        await run_checked(
            install_command(answers.pkg_manager, ["sass"], dev=True),
            cwd=project_dir,
            env=env,
        )
    except (CommandError, FileNotFoundError) as exc:
        log(f"Failed to install sass: {exc}")
        raise


async def init_git(answers: Answers, project_dir: Path, env: ExecEnv | None = None) -> bool:
    """Run ``git init`` when requested; failures only produce a log line."""
    if not answers.git:
        return False

    try:
        await run_checked(["git", "init"], cwd=project_dir, env=env)
    except (CommandError, FileNotFoundError):
        log("git init failed (git may not be installed)")
        return False

    log("Initialized empty git repository")
    return True


async def start_dev_server(answers: Answers, project_dir: Path, env: ExecEnv | None = None) -> None:
    """Start the framework dev server in the foreground; errors are logged."""
    label = "Next.js" if answers.framework == "next.js" else "Vite dev server"
    print_warning(f"Starting {label} (Ctrl+C to stop)...")
    try:
        await run_checked(dev_server_command(answers.pkg_manager), cwd=project_dir, env=env)
    except (CommandError, FileNotFoundError) as exc:
        log(f"Failed to start dev server automatically: {exc}")
