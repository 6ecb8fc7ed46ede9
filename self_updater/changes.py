"""Parsing helpers for the change summary shown before an update is applied."""

from __future__ import annotations

import re
from dataclasses import dataclass

_SIZE_UNITS = ("B", "KB", "MB", "GB")
_SIZE_BASE = 1024

# e.g. " 3 files changed, 10 insertions(+), 2 deletions(-)"
_SHORTSTAT_RE = re.compile(
    r"(\d+) files? changed(?:, (\d+) insertions?\(\+\))?(?:, (\d+) deletions?\(-\))?"
)

_STATUS_LABELS = {
    "M": "Modified",
    "A": "Added",
    "D": "Deleted",
    "R": "Renamed",
    "C": "Copied",
}


@dataclass(frozen=True)
class FileChange:
    """One line of ``git diff --name-status`` output."""

    status: str
    path: str
    old_path: str | None = None

    @property
    def code(self) -> str:
        """Single-letter status, without the similarity score of renames/copies."""
        return self.status[:1]

    @property
    def is_deleted(self) -> bool:
        return self.code == "D"

    @property
    def label(self) -> str:
        action = _STATUS_LABELS.get(self.code, "Modified")
        if self.old_path is not None:
            return f"{action}: {self.old_path} -> {self.path}"
        return f"{action}: {self.path}"


@dataclass(frozen=True)
class DiffStat:
    files_changed: int
    insertions: int
    deletions: int


def format_size(num_bytes: int) -> str:
    """Render a byte count with base-1024 units and at most two decimals.

    >>> format_size(1536)
    '1.5 KB'
    """
    if num_bytes <= 0:
        return "0 B"

    index = 0
    while index < len(_SIZE_UNITS) - 1 and num_bytes >= _SIZE_BASE ** (index + 1):
        index += 1

    value = f"{num_bytes / _SIZE_BASE**index:.2f}".rstrip("0").rstrip(".")
    return f"{value} {_SIZE_UNITS[index]}"


def parse_name_status(output: str) -> list[FileChange]:
    """Parse ``git diff --name-status`` output, skipping blank lines."""
    changes: list[FileChange] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        parts = line.split("\t")
        status = parts[0].strip()
        if len(parts) >= 3 and status[:1] in ("R", "C"):
            changes.append(FileChange(status=status, path=parts[2], old_path=parts[1]))
        elif len(parts) >= 2:
            changes.append(FileChange(status=status, path=parts[1]))
        else:
            changes.append(FileChange(status="", path=status))
    return changes


def parse_shortstat(output: str) -> DiffStat | None:
    """Parse ``git diff --shortstat`` output; None when it does not match."""
    m = _SHORTSTAT_RE.search(output)
    if m is None:
        return None
    return DiffStat(
        files_changed=int(m.group(1)),
        insertions=int(m.group(2) or 0),
        deletions=int(m.group(3) or 0),
    )


def parse_oneline_log(output: str) -> list[str]:
    """Split ``git log --oneline`` output into non-empty lines."""
    return [line for line in output.splitlines() if line.strip()]


def parse_object_size(output: str) -> int:
    """Parse ``git cat-file -s`` output; unparseable output counts as 0."""
    try:
        return int(output.strip())
    except ValueError:
        return 0


def parse_head_branch(output: str) -> str | None:
    """Extract the default branch from ``git remote show`` output."""
    for line in output.splitlines():
        key, sep, value = line.strip().partition(":")
        if sep and key == "HEAD branch":
            branch = value.strip()
            if branch and branch != "(unknown)":
                return branch
    return None
