"""Interactive question flow.

Asks the ``sasswave-create`` wizard questions in a fixed order with fixed
defaults.  Values already supplied on the command line are not asked again.
"""

from __future__ import annotations

from typing import Any

from rich.prompt import Confirm, Prompt

from .models import Answers
from .utils import console

FRAMEWORK_CHOICES = ["react", "next.js"]
LANGUAGE_CHOICES = ["JavaScript", "TypeScript"]
PKG_MANAGER_CHOICES = ["npm", "bun"]


def ask_questions(preset: dict[str, Any] | None = None, *, assume_defaults: bool = False) -> Answers:
    """Collect answers, asking only for what *preset* leaves open.

    Args:
        preset: Answers already known (e.g. from CLI flags), keyed by
            ``Answers`` field name.
        assume_defaults: Fill every open question with its default instead of
            prompting.
    """
    values: dict[str, Any] = {k: v for k, v in (preset or {}).items() if v is not None}
    defaults = Answers()

    if not assume_defaults:
        console.print("\n[bold cyan]SassWave Create CLI[/bold cyan]")
        console.print("[dim]Scaffold a SassWave-ready frontend project.[/dim]\n")

    def ask(key: str, question) -> None:
        if key in values:
            return
        values[key] = getattr(defaults, key) if assume_defaults else question()

    ask("name", lambda: Prompt.ask("App name", default=defaults.name, console=console))
    ask(
        "framework",
        lambda: Prompt.ask(
            "Choose framework", choices=FRAMEWORK_CHOICES, default="react", console=console
        ),
    )
    ask(
        "language",
        lambda: Prompt.ask(
            "Language", choices=LANGUAGE_CHOICES, default=defaults.language, console=console
        ),
    )
    ask(
        "pkg_manager",
        lambda: Prompt.ask(
            "Package manager",
            choices=PKG_MANAGER_CHOICES,
            default="npm",
            console=console,
        ),
    )
    ask("git", lambda: Confirm.ask("Initialize git repository?", default=True, console=console))
    ask(
        "want3d",
        lambda: Confirm.ask("Do you want 3D/three.js setup ?", default=False, console=console),
    )

    return Answers(**values)
