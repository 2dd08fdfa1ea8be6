"""Tests for generator invocation and package-manager commands.

Covers:
- create-vite / create-next-app command lines per language and manager
- Install and dev-server command verbs
- Bun bootstrap returning an extended execution environment
- scaffold_project refusing existing directories and wrapping failures
- Best-effort git init
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from sasswave.models import Answers
from sasswave.scaffolder.generator import (
    BUN_INSTALL_SCRIPT,
    ScaffoldError,
    dev_server_command,
    ensure_bun_installed,
    generator_command,
    init_git,
    install_command,
    install_sass,
    next_generator_command,
    scaffold_project,
    start_dev_server,
    vite_generator_command,
)
from sasswave.utils import CommandError, ExecEnv

pytestmark = pytest.mark.unit

GENERATOR = "sasswave.scaffolder.generator"


# ---------------------------------------------------------------------------
# Command construction
# ---------------------------------------------------------------------------


class TestViteCommand:
    def test_typescript_npm(self):
        answers = Answers(name="site", language="TypeScript", pkg_manager="npm")

        assert vite_generator_command(answers) == [
            "npx", "create-vite@latest", "site", "--template", "react-ts",
            "--no-rolldown", "--no-interactive",
        ]

    def test_javascript_bun(self):
        answers = Answers(name="site", language="JavaScript", pkg_manager="bun")

        assert vite_generator_command(answers) == [
            "bun", "x", "create-vite@latest", "site", "--template", "react", "--no-interactive",
        ]


class TestNextCommand:
    def test_typescript_npm(self):
        command = next_generator_command(Answers(name="web", framework="next.js"))

        assert command[:3] == ["npx", "create-next-app@latest", "web"]
        assert "--ts" in command
        assert command[command.index("--tailwind") + 1] == "false"
        assert command[command.index("--src-dir") + 1] == "true"
        assert command[command.index("--app") + 1] == "true"
        assert command[command.index("--import-alias") + 1] == "@/*"

    def test_javascript_bun(self):
        command = next_generator_command(
            Answers(name="web", framework="next.js", language="JavaScript", pkg_manager="bun")
        )

        assert command[:4] == ["bun", "create", "next-app", "web"]
        assert "--js" in command
        assert "--ts" not in command

    def test_other_manager_runs_itself(self):
        command = next_generator_command(Answers(framework="next.js", pkg_manager="pnpm"))

        assert command[0] == "pnpm"

    def test_dispatch(self):
        assert generator_command(Answers(framework="next.js"))[1] == "create-next-app@latest"
        assert generator_command(Answers(framework="react"))[1] == "create-vite@latest"


class TestInstallCommand:
    @pytest.mark.parametrize(
        ("pm", "dev", "expected"),
        [
            ("npm", False, ["npm", "install", "three"]),
            ("npm", True, ["npm", "install", "--save-dev", "three"]),
            ("yarn", False, ["yarn", "add", "three"]),
            ("yarn", True, ["yarn", "add", "--dev", "three"]),
            ("bun", True, ["bun", "add", "-D", "three"]),
            ("pnpm", False, ["pnpm", "add", "three"]),
        ],
    )
    def test_verbs(self, pm, dev, expected):
        assert install_command(pm, ["three"], dev=dev) == expected

    def test_dev_server(self):
        assert dev_server_command("npm") == ["npm", "run", "dev"]
        assert dev_server_command("bun") == ["bun", "dev"]


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------


class TestEnsureBunInstalled:
    @pytest.mark.asyncio
    async def test_already_installed(self):
        env = ExecEnv()
        with patch(f"{GENERATOR}.run_command", new=AsyncMock(return_value=(0, "1.1.0", ""))), \
             patch(f"{GENERATOR}.run_checked", new=AsyncMock()) as checked:
            result = await ensure_bun_installed(env)

        assert result is env
        checked.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_installs_and_extends_path(self):
        with patch(f"{GENERATOR}.run_command", new=AsyncMock(side_effect=FileNotFoundError("bun"))), \
             patch(f"{GENERATOR}.run_checked", new=AsyncMock()) as checked:
            result = await ensure_bun_installed(ExecEnv())

        checked.assert_awaited_once()
        assert checked.await_args.args[0] == ["bash", "-c", BUN_INSTALL_SCRIPT]
        assert result.extra_path == (str(Path.home() / ".bun" / "bin"),)

    @pytest.mark.asyncio
    async def test_install_failure_raises(self):
        failure = CommandError(["bash"], 1)
        with patch(f"{GENERATOR}.run_command", new=AsyncMock(return_value=(127, "", ""))), \
             patch(f"{GENERATOR}.run_checked", new=AsyncMock(side_effect=failure)):
            with pytest.raises(CommandError):
                await ensure_bun_installed()


class TestScaffoldProject:
    @pytest.mark.asyncio
    async def test_existing_directory_rejected(self, tmp_path: Path):
        (tmp_path / "taken").mkdir()

        with patch(f"{GENERATOR}.run_checked", new=AsyncMock()) as checked:
            with pytest.raises(ScaffoldError, match="already exists"):
                await scaffold_project(Answers(name="taken"), tmp_path)

        checked.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_runs_generator_in_cwd(self, tmp_path: Path):
        env = ExecEnv(extra_path=("/opt/bun/bin",))
        with patch(f"{GENERATOR}.run_checked", new=AsyncMock()) as checked:
            project = await scaffold_project(Answers(name="fresh"), tmp_path, env)

        assert project == tmp_path / "fresh"
        assert checked.await_args.args[0][1] == "create-vite@latest"
        assert checked.await_args.kwargs == {"cwd": tmp_path, "env": env}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [CommandError(["npx"], 1), FileNotFoundError("npx")])
    async def test_generator_failure_wrapped(self, tmp_path: Path, error):
        with patch(f"{GENERATOR}.run_checked", new=AsyncMock(side_effect=error)):
            with pytest.raises(ScaffoldError, match="Project generator failed"):
                await scaffold_project(Answers(name="fresh"), tmp_path)


class TestInstallSass:
    @pytest.mark.asyncio
    async def test_dev_dependency(self, tmp_path: Path):
        with patch(f"{GENERATOR}.run_checked", new=AsyncMock()) as checked:
            await install_sass(Answers(pkg_manager="bun"), tmp_path)

        assert checked.await_args.args[0] == ["bun", "add", "-D", "sass"]

    @pytest.mark.asyncio
    async def test_failure_reraised(self, tmp_path: Path):
        with patch(f"{GENERATOR}.run_checked", new=AsyncMock(side_effect=CommandError(["npm"], 2))):
            with pytest.raises(CommandError):
                await install_sass(Answers(), tmp_path)


class TestInitGit:
    @pytest.mark.asyncio
    async def test_not_requested(self, tmp_path: Path):
        with patch(f"{GENERATOR}.run_checked", new=AsyncMock()) as checked:
            assert await init_git(Answers(git=False), tmp_path) is False

        checked.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_success(self, tmp_path: Path):
        with patch(f"{GENERATOR}.run_checked", new=AsyncMock()) as checked:
            assert await init_git(Answers(git=True), tmp_path) is True

        assert checked.await_args.args[0] == ["git", "init"]

    @pytest.mark.asyncio
    async def test_missing_git_is_not_fatal(self, tmp_path: Path):
        with patch(f"{GENERATOR}.run_checked", new=AsyncMock(side_effect=FileNotFoundError("git"))):
            assert await init_git(Answers(git=True), tmp_path) is False


class TestStartDevServer:
    @pytest.mark.asyncio
    async def test_failure_is_logged(self, tmp_path: Path):
        with patch(f"{GENERATOR}.run_checked", new=AsyncMock(side_effect=CommandError(["npm"], 1))) as checked:
            await start_dev_server(Answers(), tmp_path)

        assert checked.await_args.args[0] == ["npm", "run", "dev"]
