#!/usr/bin/env python3

"""
Commit Command Module

Stages every working tree change and commits it with a message prefixed by the
ticket key of the current branch.
"""

import logging
import sys
from pathlib import Path
from typing import Callable, Optional, Sequence

from .base import BaseCommand
from clients.base import Commit, Repository
from clients.git import GitRepository
from clients.status import ChangeKind
from config import Config
from console_utils import print_error
from exceptions import KommitException, NothingToCommit
from message import InvocationState

logger = logging.getLogger(__name__)

RepositoryOpener = Callable[[Optional[Path]], Repository]


class CommitCommand(BaseCommand):
    """Stage all changes and commit them in one step."""

    def __init__(
        self,
        words: Sequence[str],
        config: Config,
        open_repository: Optional[RepositoryOpener] = None,
        cwd: Optional[Path] = None,
    ):
        """Initialize command with required dependencies."""
        self.words = tuple(words)
        self.config = config
        self.open_repository = open_repository or (
            lambda path: GitRepository.discover(path, git=config.git_executable)
        )
        self.cwd = cwd

    def execute(self):
        """Run the commit and report the new commit, exiting with status 1 on any failure."""
        try:
            commit = self.run()
            print(repr(commit))

        except KommitException as e:
            print_error(str(e))
            sys.exit(1)

    def run(self) -> Commit:
        """
        Stage every added, modified and deleted path and create the commit.

        Returns:
            Commit: The newly created commit

        Raises:
            KommitException: On the first failing step. Nothing is retried.
        """
        repo = self.open_repository(self.cwd)
        repo.load_index()

        state = InvocationState(
            branch=repo.current_branch(),
            args=self.words,
            ticket_prefix=self.config.ticket_prefix,
        )
        message = state.message()
        logger.debug("Composed message %r on branch %s", message, state.branch)

        if not self.stage_changes(repo):
            raise NothingToCommit("Nothing to commit")

        repo.write_index()
        tree = repo.write_tree()

        parent = repo.head_commit_id()
        user = repo.signature()
        commit = repo.commit(tree, [parent], user, user, message)

        logger.info("Created commit %s on %s", commit.id, state.branch)
        return commit

    @staticmethod
    def stage_changes(repo: Repository) -> bool:
        """Stage or unstage every changed path. Returns True if anything was staged."""
        staged = False

        for entry in repo.statuses():
            kind = entry.kind
            if kind in (ChangeKind.ADDED, ChangeKind.MODIFIED):
                repo.add_path(entry.path)
                staged = True
            elif kind is ChangeKind.DELETED:
                repo.remove_path(entry.path)
                staged = True
            else:
                logger.debug("Skipping %s (%s)", entry.path, kind.value)

        return staged
