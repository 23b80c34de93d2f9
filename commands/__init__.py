#!/usr/bin/env python3

"""Command package for Kommit."""

from .base import BaseCommand
from .commit import CommitCommand

__all__ = [
    "BaseCommand",
    "CommitCommand",
]
