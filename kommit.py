#!/usr/bin/env python3

"""
Kommit - ticket-prefixed commits in one step

Main entry point for the Kommit command-line tool. Stages every change in the
working tree and commits it, prefixing the message with the ticket key taken
from the current branch (e.g. ``KDB-42/feature-x`` -> ``KDB-42 ...``) unless
the first word already is a ticket key.
"""

import argparse
import os
import sys
from typing import List, Optional, Sequence

from clients.git import GitRepository
from commands.commit import CommitCommand
from config import Config
from console_utils import configure_logging, print_error
from exceptions import ConfigException, UsageError

__version__ = "0.1.0"


class KommitArgumentParser(argparse.ArgumentParser):
    """Argument parser that exits with status 1 like every other Kommit failure."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = KommitArgumentParser(
        prog="kommit",
        allow_abbrev=False,
        usage="%(prog)s [ticket-id] (optional) [message]",
        description="Stage all changes and commit with the ticket key of the current branch",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every git command that is run",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "words",
        nargs=argparse.REMAINDER,
        help="Commit message words, optionally starting with a ticket key (use -- before words starting with '-')",
    )
    return parser


def message_words(words: Sequence[str]) -> List[str]:
    """Return the message words, raising UsageError when there are none."""
    words = list(words)
    if words and words[0] == "--":
        words = words[1:]

    if not words:
        raise UsageError("No commit message given")

    return words


def main(argv: Optional[Sequence[str]] = None):
    """Main function to stage and commit all changes."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        words = message_words(args.words)
    except UsageError:
        parser.print_usage(sys.stderr)
        sys.exit(1)

    # The .env file lives at the repository root, so the root is found before
    # Config exists and only the environment can override the git executable
    try:
        config = Config(GitRepository.get_git_root(os.getenv("KOMMIT_GIT") or "git"))
    except ConfigException as e:
        print_error(f"Configuration Error: {str(e)}")
        sys.exit(1)

    configure_logging("DEBUG" if args.verbose else config.log_level)

    CommitCommand(words, config).execute()


if __name__ == "__main__":
    main()
