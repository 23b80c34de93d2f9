#!/usr/bin/env python3

import logging
import os
import stat
import subprocess
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from exceptions import (
    DetachedOrMissingHead,
    GitOperationsException,
    HeadUnresolved,
    IndexUnavailable,
    PathOperationFailed,
    RepositoryNotFound,
    SignatureUnavailable,
    WriteFailed,
)

from .base import Commit, Repository, Signature
from .status import StatusEntry, parse_porcelain

logger = logging.getLogger(__name__)

REGULAR_FILE_MODE = "100644"
EXECUTABLE_FILE_MODE = "100755"
SYMLINK_MODE = "120000"


def _git_error(error: Exception) -> str:
    """Best human-readable reason for a failed git invocation."""
    if isinstance(error, subprocess.CalledProcessError):
        output = (error.stderr or error.stdout or "").strip()
        if output:
            return output
    return str(error)


class GitRepository(Repository):
    """Repository handle backed by the git executable."""

    def __init__(self, root: Path, git: str = "git"):
        self.root = Path(root)
        self.git = git
        # path -> (mode, blob id) to stage, or None to remove from the index
        self._pending: Dict[str, Optional[Tuple[str, str]]] = {}

    def _run(
        self,
        *args: str,
        input: Optional[str] = None,
        env: Optional[Mapping[str, str]] = None,
        cwd: Optional[Path] = None,
        strip: bool = True,
    ) -> str:
        """Run a git command and return its stdout."""
        logger.debug("git %s", " ".join(args))
        result = subprocess.run(
            [self.git, *args],
            cwd=str(cwd or self.root),
            input=input,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="surrogateescape",
            env={**os.environ, **env} if env else None,
            check=True,
        )
        return result.stdout.strip() if strip else result.stdout

    @classmethod
    def discover(cls, path: Optional[Path] = None, git: str = "git") -> "GitRepository":
        """Find the repository containing ``path`` by walking up the directory tree."""
        start = Path(path or Path.cwd())
        try:
            root = cls(start, git)._run("rev-parse", "--show-toplevel", cwd=start)
        except (subprocess.CalledProcessError, OSError) as e:
            raise RepositoryNotFound(f"No repository found at {start}: {_git_error(e)}")

        logger.debug("Discovered repository at %s", root)
        return cls(Path(root), git)

    @classmethod
    def get_git_root(cls, git: str = "git") -> Path:
        """Get the root directory of the current git repository."""
        try:
            return cls.discover(git=git).root
        except RepositoryNotFound:
            # If not in a git repo, fall back to current directory
            return Path.cwd()

    def load_index(self) -> None:
        try:
            entries = self._run("ls-files", "--stage", "-z")
        except (subprocess.CalledProcessError, OSError) as e:
            raise IndexUnavailable(f"Index not found: {_git_error(e)}")

        self._pending.clear()
        logger.debug("Loaded index with %d entries", entries.count("\0"))

    def current_branch(self) -> str:
        """Resolve the branch name through the symbolic HEAD reference."""
        try:
            branch = self._run("symbolic-ref", "--short", "-q", "HEAD")
        except (subprocess.CalledProcessError, OSError) as e:
            raise DetachedOrMissingHead(f"No branch found, HEAD is detached: {_git_error(e)}")

        # HEAD must also point at a commit, so unborn branches are rejected here
        try:
            self.head_commit_id()
        except HeadUnresolved as e:
            raise DetachedOrMissingHead(f"Branch '{branch}' has no commits yet: {e}")
        return branch

    def head_commit_id(self) -> str:
        try:
            return self._run("rev-parse", "--verify", "-q", "HEAD^{commit}")
        except (subprocess.CalledProcessError, OSError) as e:
            raise HeadUnresolved(f"No HEAD commit found: {_git_error(e)}")

    def statuses(self) -> List[StatusEntry]:
        try:
            # Stripping would eat the leading space of an unstaged " M" entry
            return parse_porcelain(
                self._run(
                    "status", "--porcelain=v1", "-z", "--untracked-files=all", strip=False
                )
            )
        except (subprocess.CalledProcessError, OSError, ValueError) as e:
            raise GitOperationsException(f"Failed to read repository status: {_git_error(e)}")

    def add_path(self, path: str) -> None:
        """Write the working tree content of ``path`` as a blob and queue it for the index."""
        full_path = self.root / path
        try:
            info = os.lstat(full_path)
        except OSError as e:
            raise PathOperationFailed(path, e.strerror or str(e))

        try:
            if stat.S_ISLNK(info.st_mode):
                mode = SYMLINK_MODE
                blob = self._run("hash-object", "-w", "--stdin", input=os.readlink(full_path))
            elif stat.S_ISREG(info.st_mode):
                mode = EXECUTABLE_FILE_MODE if info.st_mode & 0o111 else REGULAR_FILE_MODE
                blob = self._run("hash-object", "-w", "--", path)
            else:
                raise PathOperationFailed(path, "not a regular file or symlink")
        except (subprocess.CalledProcessError, OSError) as e:
            raise PathOperationFailed(path, _git_error(e))

        logger.debug("Staged %s as %s %s", path, mode, blob)
        self._pending[path] = (mode, blob)

    def remove_path(self, path: str) -> None:
        logger.debug("Removing %s from the index", path)
        self._pending[path] = None

    def write_index(self) -> None:
        """Apply queued additions and removals to the on-disk index."""
        additions = "".join(
            f"{entry[0]} {entry[1]}\t{path}\0"
            for path, entry in self._pending.items()
            if entry is not None
        )
        removals = "".join(
            f"{path}\0" for path, entry in self._pending.items() if entry is None
        )

        try:
            if additions:
                self._run("update-index", "-z", "--index-info", input=additions)
            if removals:
                self._run("update-index", "-z", "--force-remove", "--stdin", input=removals)
        except (subprocess.CalledProcessError, OSError) as e:
            raise WriteFailed(f"Could not write index: {_git_error(e)}")

        self._pending.clear()

    def write_tree(self) -> str:
        try:
            return self._run("write-tree")
        except (subprocess.CalledProcessError, OSError) as e:
            raise WriteFailed(f"Could not write tree: {_git_error(e)}")

    def signature(self) -> Signature:
        """Read the configured identity, failing when user.name or user.email is unset."""
        # git var would otherwise guess an identity from EMAIL, passwd and the hostname
        for key in ("user.name", "user.email"):
            try:
                self._run("config", "--get", key)
            except (subprocess.CalledProcessError, OSError):
                raise SignatureUnavailable(f"Could not get signature: {key} is not configured")

        try:
            return Signature.parse(self._run("var", "GIT_AUTHOR_IDENT"))
        except (subprocess.CalledProcessError, OSError, ValueError) as e:
            raise SignatureUnavailable(f"Could not get signature: {_git_error(e)}")

    def commit(
        self,
        tree: str,
        parents: Sequence[str],
        author: Signature,
        committer: Signature,
        message: str,
    ) -> Commit:
        """Create the commit object, then advance HEAD from its first parent to it."""
        env = {**author.env("AUTHOR"), **committer.env("COMMITTER")}
        parent_args = [arg for parent in parents for arg in ("-p", parent)]

        try:
            oid = self._run("commit-tree", tree, *parent_args, input=message, env=env)
        except (subprocess.CalledProcessError, OSError) as e:
            raise WriteFailed(f"Could not commit: {_git_error(e)}")

        summary = message.split("\n", 1)[0]
        old_value = parents[0] if parents else ""
        try:
            self._run("update-ref", "-m", f"commit: {summary}", "HEAD", oid, old_value)
        except (subprocess.CalledProcessError, OSError) as e:
            raise WriteFailed(f"Could not update HEAD to {oid}: {_git_error(e)}")

        return self.find_commit(oid)

    def find_commit(self, oid: str) -> Commit:
        try:
            raw = self._run("cat-file", "commit", oid, strip=False)
            return Commit.parse(oid, raw)
        except (subprocess.CalledProcessError, OSError, ValueError) as e:
            raise GitOperationsException(f"Could not find commit {oid}: {_git_error(e)}")
