#!/usr/bin/env python3

"""
Message Module

Builds commit messages from the current branch name and the words given on the
command line. Ticket keys such as ``KDB-123`` are taken from the first word when
present, otherwise from the branch name.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

DEFAULT_TICKET_PREFIX = "KDB-"


def args_have_ticket_id(args: Sequence[str], prefix: str = DEFAULT_TICKET_PREFIX) -> bool:
    """Check whether the first word already carries a ticket key."""
    return bool(args) and args[0].startswith(prefix)


def branch_ticket_id(branch: str, prefix: str = DEFAULT_TICKET_PREFIX) -> Optional[str]:
    """
    Extract the ticket key from a branch name.

    ``KDB-42/feature-x`` gives ``KDB-42`` and ``KDB-42`` gives itself.

    Returns:
        The ticket key, or None if the branch does not follow the convention.
    """
    if not branch.startswith(prefix):
        return None

    index = branch.find("/")
    if index != -1:
        return branch[:index]

    return branch


def split_message(
    branch: str, args: Sequence[str], prefix: str = DEFAULT_TICKET_PREFIX
) -> List[str]:
    """Return the words of the commit message in order."""
    if args_have_ticket_id(args, prefix):
        return list(args)

    ticket_id = branch_ticket_id(branch, prefix)
    if ticket_id is not None:
        return [ticket_id, *args]

    return list(args)


def compose_message(
    branch: str, args: Sequence[str], prefix: str = DEFAULT_TICKET_PREFIX
) -> str:
    """Compose the final commit message."""
    return " ".join(split_message(branch, args, prefix))


@dataclass(frozen=True)
class InvocationState:
    """Branch and command line words captured once per run."""

    branch: str
    args: Tuple[str, ...]
    ticket_prefix: str = DEFAULT_TICKET_PREFIX

    def message(self) -> str:
        return compose_message(self.branch, self.args, self.ticket_prefix)
