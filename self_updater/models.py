"""Data models for the self-updater."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Stage(Enum):
    """Pipeline stage reported on each progress event."""

    FETCH = "fetch"
    PULL = "pull"
    INSTALL = "install"
    BUILD = "build"
    COMPLETE = "complete"


@dataclass
class UpdateRequest:
    """Inbound request to update the working copy.

    ``branch`` is optional; when it is missing or empty the remote's default
    branch is used.
    """

    branch: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> UpdateRequest:
        """Validate a decoded JSON body.

        Raises:
            ValueError: If the body is not an object or ``branch`` is not a string.
        """
        if not isinstance(data, dict):
            raise ValueError("Invalid request body: expected a JSON object")
        branch = data.get("branch")
        if branch is not None and not isinstance(branch, str):
            raise ValueError("Invalid request body: branch must be a string")
        return cls(branch=branch or None)


@dataclass
class ChangeSummary:
    """What an update would bring in, between the local HEAD and the remote tip."""

    changed_files: list[str] = field(default_factory=list)
    additions: int = 0
    deletions: int = 0
    commit_messages: list[str] = field(default_factory=list)
    total_size: str = "0 B"
    current_commit: str = ""
    remote_commit: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "changedFiles": self.changed_files,
            "additions": self.additions,
            "deletions": self.deletions,
            "commitMessages": self.commit_messages,
            "totalSize": self.total_size,
            "currentCommit": self.current_commit,
            "remoteCommit": self.remote_commit,
        }


@dataclass
class ProgressEvent:
    """One line of the progress stream."""

    stage: Stage
    message: str
    progress: int | None = None
    error: str | None = None
    details: ChangeSummary | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"stage": self.stage.value, "message": self.message}
        if self.progress is not None:
            data["progress"] = self.progress
        if self.error is not None:
            data["error"] = self.error
        if self.details is not None:
            data["details"] = self.details.to_dict()
        return data

    def to_line(self) -> bytes:
        """Encode as a single newline-terminated JSON record."""
        return (json.dumps(self.to_dict()) + "\n").encode()
