"""External command templates and the subprocess runner.

Every command the update pipeline issues is listed here as a template.
Values interpolated into a template must go through :func:`render`, which
shell-quotes them.
"""

from __future__ import annotations

import asyncio
import shlex

from self_updater.errors import CommandError
from self_updater.logging import get_logger

log = get_logger("self_updater.commands")

REMOTE = "origin"

GIT_REMOTE_URL = "git remote get-url {remote}"
GIT_REMOTE_SHOW = "git remote show {remote}"
GIT_FETCH_ALL = "git fetch --all"
GIT_VERIFY_REF = "git rev-parse --verify {ref}"
GIT_REV_PARSE = "git rev-parse {ref}"
GIT_DIFF_NAME_STATUS = "git diff --name-status {base}..{target}"
GIT_CAT_FILE_SIZE = "git cat-file -s {object}"
GIT_LOG_ONELINE = "git log --reverse --oneline {base}..{target}"
GIT_DIFF_SHORTSTAT = "git diff --shortstat {base}..{target}"
GIT_PULL = "git pull {remote} {branch}"

# Keep stderr excerpts short enough for a progress message
_STDERR_LIMIT = 500


def render(template: str, **values: str) -> str:
    """Fill a command template with shell-quoted values."""
    return template.format(**{key: shlex.quote(value) for key, value in values.items()})


class CommandRunner:
    """Runs shell commands in the project directory."""

    def __init__(self, cwd: str = ".", timeout: float | None = None) -> None:
        self._cwd = cwd
        self._timeout = timeout

    @property
    def cwd(self) -> str:
        return self._cwd

    async def run(self, cmd: str) -> str:
        """Run a shell command and return its stdout.

        Raises:
            CommandError: On a non-zero exit, a timeout, or a spawn failure.
        """
        log.debug("command_started", cmd=cmd, cwd=self._cwd)
        try:
            proc = await asyncio.create_subprocess_shell(
                cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=self._cwd,
            )
        except OSError as exc:
            raise CommandError(cmd, None, str(exc)) from exc

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self._timeout)
        except TimeoutError as exc:
            proc.kill()
            await proc.wait()
            log.warning("command_timed_out", cmd=cmd, timeout=self._timeout)
            raise CommandError(cmd, None, f"timed out after {self._timeout}s") from exc

        if proc.returncode != 0:
            err = stderr.decode(errors="replace").strip()[:_STDERR_LIMIT]
            log.warning("command_failed", cmd=cmd, returncode=proc.returncode, stderr=err)
            raise CommandError(cmd, proc.returncode, err)

        return stdout.decode(errors="replace")
