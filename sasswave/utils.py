"""Shared utility functions for SassWave Create.

Provides async command execution with an explicit execution environment,
JSON I/O, file-system helpers and Rich-based console output.  Every helper
that prints goes through the single module-level ``console`` so the CLI keeps
one consistent, prefixed output stream.
"""

from __future__ import annotations

import asyncio
import json
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.rule import Rule
from rich.table import Table

console = Console()

LOG_PREFIX = "[sasswave]"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class CommandError(Exception):
    """Raised when an external command exits with a non-zero status."""

    def __init__(self, command: list[str], returncode: int, stderr: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        message = f"Command failed (exit {returncode}): {' '.join(command)}"
        if stderr:
            message += f"\n{stderr}"
        super().__init__(message)


# ---------------------------------------------------------------------------
# Execution environment
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ExecEnv:
    """Environment additions for child processes spawned during one run.

    ``extra_path`` entries are prepended to ``PATH`` for every command started
    with this environment.  The parent process environment is never touched.
    """

    extra_path: tuple[str, ...] = field(default_factory=tuple)

    def with_path(self, directory: str | Path) -> "ExecEnv":
        """Return a copy with *directory* prepended to the search path."""
        entry = str(directory)
        if entry in self.extra_path:
            return self
        return ExecEnv(extra_path=(entry, *self.extra_path))

    def as_env(self) -> dict[str, str] | None:
        """Return the overrides to merge on top of ``os.environ`` (or ``None``)."""
        if not self.extra_path:
            return None
        current = os.environ.get("PATH", "")
        parts = [*self.extra_path, current] if current else list(self.extra_path)
        return {"PATH": os.pathsep.join(parts)}


# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    timeout: float | None = None,
    capture: bool = False,
    env: ExecEnv | None = None,
) -> tuple[int, str, str]:
    """Run a command asynchronously.

    Args:
        cmd: Program and arguments.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds before the process is killed
            (``None`` waits indefinitely, as package installs may be slow).
        capture: Whether to capture stdout/stderr.  When ``False`` the child
            inherits the terminal, so generator and installer output appears
            inline with ours.
        env: Optional execution environment whose overrides are merged on top
            of ``os.environ``.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  If *capture* is ``False``
        the stdout/stderr strings will be empty.

    Raises:
        FileNotFoundError: If the program does not exist.
    """
    merged_env: dict[str, str] | None = None
    overrides = env.as_env() if env else None
    if overrides:
        merged_env = {**os.environ, **overrides}

    stdout_pipe = asyncio.subprocess.PIPE if capture else None
    stderr_pipe = asyncio.subprocess.PIPE if capture else None

    process = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=stdout_pipe,
        stderr=stderr_pipe,
        cwd=str(cwd) if cwd else None,
        env=merged_env,
    )

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (-1, "", f"Command timed out after {timeout}s: {' '.join(cmd)}")

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


async def run_checked(
    cmd: list[str],
    cwd: str | Path | None = None,
    env: ExecEnv | None = None,
    capture: bool = False,
) -> str:
    """Run a command and raise ``CommandError`` on a non-zero exit.

    Returns the captured stdout (empty when *capture* is ``False``).
    """
    returncode, stdout, stderr = await run_command(cmd, cwd=cwd, capture=capture, env=env)
    if returncode != 0:
        raise CommandError(cmd, returncode, stderr)
    return stdout


# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


def load_json(path: str | Path) -> Any:
    """Load and parse a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
    """
    raw = Path(path).read_text(encoding="utf-8")
    return json.loads(raw)


def save_json(data: dict[str, Any] | list[Any], path: str | Path) -> None:
    """Save data as JSON with two-space indentation and a trailing newline."""
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    content = json.dumps(data, indent=2, ensure_ascii=False)
    file_path.write_text(content + "\n", encoding="utf-8")


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def ensure_dir(path: str | Path) -> Path:
    """Create a directory (and parents) if it does not exist."""
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def write_file(path: str | Path, content: str) -> Path:
    """Create parent dirs and write *content*, replacing any existing file."""
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(content, encoding="utf-8")
    return file_path


def remove_if_exists(path: Path) -> bool:
    """Delete a file or directory tree at *path*; return whether it existed."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
        return True
    if path.exists() or path.is_symlink():
        path.unlink()
        return True
    return False


def relative_to(path: Path, base: Path) -> str:
    """Render *path* relative to *base* for log messages (POSIX separators)."""
    try:
        return path.relative_to(base).as_posix()
    except ValueError:
        return str(path)


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
    """
    if seconds < 0:
        return "0.0s"

    minutes = int(seconds // 60)
    secs = seconds % 60
    if minutes > 0:
        return f"{minutes}m {int(secs)}s"
    return f"{secs:.1f}s"


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


PHASE_NAMES: dict[int, str] = {
    1: "SCAFFOLD",
    2: "STYLE",
    3: "THREE",
    4: "GIT",
}

PHASE_COLORS: dict[int, str] = {
    1: "bright_cyan",
    2: "bright_magenta",
    3: "bright_yellow",
    4: "bright_green",
}


def log(message: str) -> None:
    """Print a message behind the blue ``[sasswave]`` prefix."""
    console.print(f"[blue]{escape(LOG_PREFIX)}[/blue] {escape(message)}", highlight=False)


def print_phase_header(phase: int, name: str) -> None:
    """Print a full-width rule announcing a pipeline phase."""
    color = PHASE_COLORS.get(phase, "white")
    console.print()
    console.print(
        Rule(
            f"[bold {color}] Phase {phase}: {name.upper()} [/bold {color}]",
            style=color,
        )
    )


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{escape(message)}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")
