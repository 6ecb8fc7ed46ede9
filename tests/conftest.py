"""Shared fixtures for self-updater tests."""

from __future__ import annotations

from collections.abc import Callable
from unittest.mock import AsyncMock

import pytest

from self_updater.commands import CommandRunner
from self_updater.config import Settings
from self_updater.errors import CommandError

CURRENT_SHA = "1111111aaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa"
REMOTE_SHA = "2222222bbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbb"



def _happy_path() -> dict[str, str | BaseException]:
    return {
        "git remote get-url origin": "https://github.com/example/app.git\n",
        "git remote show origin": (
            "* remote origin\n"
            "  Fetch URL: https://github.com/example/app.git\n"
            "  HEAD branch: main\n"
        ),
        "git fetch --all": "",
        "git rev-parse --verify origin/main": f"{REMOTE_SHA}\n",
        "git rev-parse HEAD": f"{CURRENT_SHA}\n",
        "git rev-parse origin/main": f"{REMOTE_SHA}\n",
        f"git diff --name-status {CURRENT_SHA}..{REMOTE_SHA}": (
            "M\tsrc/app.ts\nA\tsrc/new.ts\nD\tlegacy.ts\n"
        ),
        f"git cat-file -s {REMOTE_SHA}:src/app.ts": "1024\n",
        f"git cat-file -s {REMOTE_SHA}:src/new.ts": "512\n",
        f"git log --reverse --oneline {CURRENT_SHA}..{REMOTE_SHA}": (
            "3333333 Add new module\n2222222 Fix app startup\n"
        ),
        f"git diff --shortstat {CURRENT_SHA}..{REMOTE_SHA}": (
            " 3 files changed, 10 insertions(+), 2 deletions(-)\n"
        ),
        "git pull origin main": "",
        "pnpm install": "",
        "pnpm build": "",
    }


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def git_responses() -> dict[str, str | BaseException]:
    """Command → stdout (or exception) for a repo one pull behind origin/main."""
    return _happy_path()


@pytest.fixture
def make_runner() -> Callable[[dict[str, str | BaseException]], AsyncMock]:
    """Build a mock CommandRunner that answers from a response table.

    Commands missing from the table fail like a non-zero exit.
    """

    def _make(responses: dict[str, str | BaseException]) -> AsyncMock:
        async def _run(cmd: str) -> str:
            if cmd not in responses:
                raise CommandError(cmd, 128, "fatal: unexpected command")
            result = responses[cmd]
            if isinstance(result, BaseException):
                raise result
            return result

        runner = AsyncMock(spec=CommandRunner)
        runner.run = AsyncMock(side_effect=_run)
        return runner

    return _make


def issued(runner: AsyncMock) -> list[str]:
    """Commands the mock runner was asked to run, in order."""
    return [str(call.args[0]) for call in runner.run.call_args_list]
