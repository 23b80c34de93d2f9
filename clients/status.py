#!/usr/bin/env python3

"""
Status Module

Parses ``git status --porcelain=v1 -z`` output into status entries and
classifies each entry into the change it represents.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class ChangeKind(Enum):
    """What happened to a path relative to HEAD and the index."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    UNCHANGED = "unchanged"
    CONFLICTED = "conflicted"
    IGNORED = "ignored"
    OTHER = "other"


# Both sides added or both deleted are unmerged states in porcelain output
UNMERGED_PAIRS = {"AA", "DD"}


def classify_status(index_status: str, worktree_status: str) -> ChangeKind:
    """
    Classify a porcelain ``XY`` pair.

    Args:
        index_status: The X column (index vs HEAD)
        worktree_status: The Y column (working tree vs index)

    Returns:
        ChangeKind: The change to act on for this path
    """
    code = index_status + worktree_status

    if code == "??":
        return ChangeKind.ADDED
    if code == "!!":
        return ChangeKind.IGNORED
    if "U" in code or code in UNMERGED_PAIRS:
        return ChangeKind.CONFLICTED
    if worktree_status == "D" or (index_status == "D" and worktree_status == " "):
        return ChangeKind.DELETED
    if "A" in code:
        return ChangeKind.ADDED
    if any(c in code for c in "MTRC"):
        return ChangeKind.MODIFIED
    if code == "  ":
        return ChangeKind.UNCHANGED

    return ChangeKind.OTHER


@dataclass(frozen=True)
class StatusEntry:
    """One changed path as reported by the repository."""

    path: str
    index_status: str = " "
    worktree_status: str = " "
    original_path: Optional[str] = None

    @property
    def kind(self) -> ChangeKind:
        return classify_status(self.index_status, self.worktree_status)


def parse_porcelain(output: str) -> List[StatusEntry]:
    """
    Parse NUL separated porcelain v1 output.

    Renamed and copied entries are followed by a second field holding the
    source path, which is kept as ``original_path``.
    """
    entries = []
    fields = output.split("\0")
    i = 0

    while i < len(fields):
        field = fields[i]
        i += 1
        if not field:
            continue

        if len(field) < 4 or field[2] != " ":
            raise ValueError(f"Malformed status entry: {field!r}")

        index_status, worktree_status, path = field[0], field[1], field[3:]
        original_path = None
        if index_status in "RC" or worktree_status in "RC":
            if i >= len(fields) or not fields[i]:
                raise ValueError(f"Missing source path for entry: {field!r}")
            original_path = fields[i]
            i += 1

        entries.append(
            StatusEntry(
                path=path,
                index_status=index_status,
                worktree_status=worktree_status,
                original_path=original_path,
            )
        )

    return entries
