"""Exceptions raised by the update pipeline."""

from __future__ import annotations


class SelfUpdaterError(Exception):
    """Base class for self-updater errors."""


class UpdateError(SelfUpdaterError):
    """A precondition of the update is not met (missing remote, missing branch, ...).

    The message is shown to the user verbatim, so it should say how to fix it.
    """


class CommandError(SelfUpdaterError):
    """An external command exited non-zero, timed out, or could not be started."""

    def __init__(self, cmd: str, returncode: int | None, stderr: str = "") -> None:
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
        if returncode is None:
            detail = stderr or "did not complete"
        else:
            detail = f"exited with code {returncode}"
            if stderr:
                detail = f"{detail}: {stderr}"
        super().__init__(f"Command failed: {cmd} ({detail})")
