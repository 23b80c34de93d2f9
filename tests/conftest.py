import shutil
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pytest

from clients.base import Commit, Repository, Signature
from clients.status import StatusEntry

KOMMIT_ENV_VARS = ("KOMMIT_TICKET_PREFIX", "KOMMIT_LOG_LEVEL", "KOMMIT_GIT")

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


@pytest.fixture(autouse=True)
def clean_kommit_env(monkeypatch):
    # setenv first so monkeypatch also removes values that load_dotenv adds later
    for name in KOMMIT_ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


class FakeRepository(Repository):
    """In-memory repository recording every call made against it."""

    def __init__(
        self,
        branch: str = "master",
        entries: Optional[List[StatusEntry]] = None,
        head: str = "a" * 40,
        user: Optional[Signature] = None,
        errors: Optional[Dict[str, Exception]] = None,
    ):
        self.branch = branch
        self.entries = entries or []
        self.head = head
        self.user = user or Signature("Jane Doe", "jane@example.com", 1700000000, "+0100")
        self.errors = errors or {}
        self.calls: List[tuple] = []
        self.added: List[str] = []
        self.removed: List[str] = []
        self.commits: List[Commit] = []

    def _record(self, name: str, *args):
        self.calls.append((name, *args))
        if name in self.errors:
            raise self.errors[name]

    def load_index(self) -> None:
        self._record("load_index")

    def current_branch(self) -> str:
        self._record("current_branch")
        return self.branch

    def statuses(self) -> List[StatusEntry]:
        self._record("statuses")
        return list(self.entries)

    def add_path(self, path: str) -> None:
        self._record("add_path", path)
        self.added.append(path)

    def remove_path(self, path: str) -> None:
        self._record("remove_path", path)
        self.removed.append(path)

    def write_index(self) -> None:
        self._record("write_index")

    def write_tree(self) -> str:
        self._record("write_tree")
        return "t" * 40

    def head_commit_id(self) -> str:
        self._record("head_commit_id")
        return self.head

    def signature(self) -> Signature:
        self._record("signature")
        return self.user

    def commit(
        self,
        tree: str,
        parents: Sequence[str],
        author: Signature,
        committer: Signature,
        message: str,
    ) -> Commit:
        self._record("commit", tree, tuple(parents), message)
        commit = Commit(
            id="c" * 40,
            tree=tree,
            parents=tuple(parents),
            author=author,
            committer=committer,
            message=message,
        )
        self.commits.append(commit)
        self.head = commit.id
        return commit


def git(repo: Path, *args: str) -> str:
    """Run git in ``repo`` and return its stripped stdout."""
    result = subprocess.run(
        ["git", *args], cwd=repo, capture_output=True, text=True, check=True
    )
    return result.stdout.strip()


@pytest.fixture
def git_env(tmp_path, monkeypatch):
    """Isolate git from the user's global and system configuration."""
    global_config = tmp_path / "gitconfig"
    global_config.write_text("")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(global_config))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))
    for name in (
        "GIT_DIR",
        "GIT_WORK_TREE",
        "GIT_INDEX_FILE",
        "GIT_AUTHOR_NAME",
        "GIT_AUTHOR_EMAIL",
        "GIT_AUTHOR_DATE",
        "GIT_COMMITTER_NAME",
        "GIT_COMMITTER_EMAIL",
        "GIT_COMMITTER_DATE",
    ):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


def init_repo(path: Path, branch: str) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    git(path, "init", "-q")
    git(path, "symbolic-ref", "HEAD", f"refs/heads/{branch}")
    git(path, "config", "user.name", "Jane Doe")
    git(path, "config", "user.email", "jane@example.com")
    git(path, "config", "commit.gpgsign", "false")
    return path


@pytest.fixture
def git_repo(git_env):
    """A repository on branch KDB-42/feature-x with one commit holding a.txt and b.txt."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    repo = init_repo(git_env / "repo", "KDB-42/feature-x")
    (repo / "a.txt").write_text("alpha\n")
    (repo / "b.txt").write_text("beta\n")
    git(repo, "add", "a.txt", "b.txt")
    git(repo, "commit", "-q", "-m", "initial")
    return repo
