#!/usr/bin/env python3

"""
Base Repository Module

Defines the repository handle used by the commit procedure, and the value types
it returns.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from .status import StatusEntry

IDENT_PATTERN = re.compile(
    r"^(?P<name>.*?) <(?P<email>[^<>]*)> (?P<timestamp>-?\d+) (?P<offset>[+-]\d{4})$"
)


@dataclass(frozen=True)
class Signature:
    """Author or committer identity with its timestamp."""

    name: str
    email: str
    timestamp: int
    offset: str = "+0000"

    @classmethod
    def parse(cls, ident: str) -> "Signature":
        """Parse a git ident line, e.g. ``Jane <jane@example.com> 1700000000 +0100``."""
        match = IDENT_PATTERN.match(ident.strip())
        if not match:
            raise ValueError(f"Malformed identity: {ident!r}")
        return cls(
            name=match.group("name"),
            email=match.group("email"),
            timestamp=int(match.group("timestamp")),
            offset=match.group("offset"),
        )

    def env(self, role: str) -> Dict[str, str]:
        """Environment variables git reads for the given role (AUTHOR or COMMITTER)."""
        return {
            f"GIT_{role}_NAME": self.name,
            f"GIT_{role}_EMAIL": self.email,
            f"GIT_{role}_DATE": f"{self.timestamp} {self.offset}",
        }

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"


@dataclass(frozen=True, repr=False)
class Commit:
    """A commit object read back from the object database."""

    id: str
    tree: str
    parents: Tuple[str, ...]
    author: Signature
    committer: Signature
    message: str

    @property
    def summary(self) -> str:
        return self.message.split("\n", 1)[0]

    def __repr__(self) -> str:
        return f"Commit {{ id: {self.id}, summary: {self.summary!r} }}"

    @classmethod
    def parse(cls, oid: str, raw: str) -> "Commit":
        """Parse the output of ``git cat-file commit``."""
        header, _, message = raw.partition("\n\n")
        tree = ""
        parents: List[str] = []
        people: Dict[str, Signature] = {}

        for line in header.split("\n"):
            # Continuation lines belong to multi-line headers such as gpgsig
            if line.startswith(" "):
                continue
            key, _, value = line.partition(" ")
            if key == "tree":
                tree = value
            elif key == "parent":
                parents.append(value)
            elif key in ("author", "committer"):
                people[key] = Signature.parse(value)

        if not tree or "author" not in people or "committer" not in people:
            raise ValueError(f"Malformed commit object {oid}")

        return cls(
            id=oid,
            tree=tree,
            parents=tuple(parents),
            author=people["author"],
            committer=people["committer"],
            message=message,
        )


class Repository(ABC):
    """Handle on a repository. The commit procedure only talks to this interface."""

    @abstractmethod
    def load_index(self) -> None:
        """Load the staging area."""

    @abstractmethod
    def current_branch(self) -> str:
        """Return the short name of the checked out branch."""

    @abstractmethod
    def statuses(self) -> List[StatusEntry]:
        """List every changed path against the index and the working tree."""

    @abstractmethod
    def add_path(self, path: str) -> None:
        """Stage the working tree content of a path."""

    @abstractmethod
    def remove_path(self, path: str) -> None:
        """Remove a path from the index."""

    @abstractmethod
    def write_index(self) -> None:
        """Persist the staged changes to disk."""

    @abstractmethod
    def write_tree(self) -> str:
        """Write a tree object from the index and return its id."""

    @abstractmethod
    def head_commit_id(self) -> str:
        """Return the id of the commit HEAD points to."""

    @abstractmethod
    def signature(self) -> Signature:
        """Return the configured identity."""

    @abstractmethod
    def commit(
        self,
        tree: str,
        parents: Sequence[str],
        author: Signature,
        committer: Signature,
        message: str,
    ) -> Commit:
        """Create a commit object and move HEAD to it."""
