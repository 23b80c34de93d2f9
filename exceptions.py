#!/usr/bin/env python3

"""Custom exceptions for Kommit components."""


class KommitException(Exception):
    """Base exception for every Kommit failure. All of them are fatal."""

    pass


class UsageError(KommitException):
    """Exception raised when the command line is missing message words."""

    pass


class ConfigException(KommitException):
    """Exception raised for invalid configuration values."""

    pass


class GitOperationsException(KommitException):
    """Exception raised by repository operations."""

    pass


class RepositoryNotFound(GitOperationsException):
    """No repository could be discovered from the working directory."""

    pass


class IndexUnavailable(GitOperationsException):
    """The repository index could not be loaded."""

    pass


class HeadUnresolved(GitOperationsException):
    """HEAD does not resolve to a commit."""

    pass


class DetachedOrMissingHead(HeadUnresolved):
    """No branch name can be resolved because HEAD is detached or its branch has no commits."""

    pass


class SignatureUnavailable(GitOperationsException):
    """No author/committer identity is configured."""

    pass


class PathOperationFailed(GitOperationsException):
    """Staging or unstaging a single path failed."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Failed to stage '{path}': {reason}")
        self.path = path
        self.reason = reason


class NothingToCommit(GitOperationsException):
    """The status scan found no changes to stage."""

    pass


class WriteFailed(GitOperationsException):
    """The index, a tree, or a commit object could not be persisted."""

    pass
