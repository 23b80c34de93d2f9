#!/usr/bin/env python3

"""
Repository client modules.

This package contains the repository handle used by Kommit:
- Repository: abstract handle the commit procedure talks to
- GitRepository: handle backed by the git executable
- StatusEntry / ChangeKind: parsed working tree status
"""

from .base import Commit, Repository, Signature
from .git import GitRepository
from .status import ChangeKind, StatusEntry, parse_porcelain

__all__ = [
    'Commit',
    'Repository',
    'Signature',
    'GitRepository',
    'ChangeKind',
    'StatusEntry',
    'parse_porcelain',
]
