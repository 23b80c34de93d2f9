#!/usr/bin/env python3

"""
Config Module

Loads Kommit settings from the environment and from a ``.env`` file at the
repository root.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from exceptions import ConfigException
from message import DEFAULT_TICKET_PREFIX

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Config:
    """Settings for a single Kommit run."""

    def __init__(self, project_root: Optional[Path] = None):
        """
        Initialize configuration from environment variables.

        Loads the ``.env`` file in the project root first. Variables already set
        in the environment take precedence over the file.

        Args:
            project_root: Directory holding the ``.env`` file, defaults to cwd

        Raises:
            ConfigException: If a setting is present but invalid
        """
        project_root = project_root or Path.cwd()
        load_dotenv(project_root / ".env")

        self.ticket_prefix = os.getenv("KOMMIT_TICKET_PREFIX", DEFAULT_TICKET_PREFIX)
        self.log_level = os.getenv("KOMMIT_LOG_LEVEL", "WARNING").upper()
        self.git_executable = os.getenv("KOMMIT_GIT", "git")

        self._validate_config()

    def _validate_config(self) -> None:
        """Validate that configured values are usable."""
        if not self.ticket_prefix or any(c.isspace() for c in self.ticket_prefix):
            raise ConfigException(
                "Invalid KOMMIT_TICKET_PREFIX. The ticket prefix must be non-empty "
                "and contain no whitespace (e.g., 'KDB-')."
            )

        if self.log_level not in LOG_LEVELS:
            raise ConfigException(
                f"Invalid KOMMIT_LOG_LEVEL '{self.log_level}'. "
                f"Expected one of: {', '.join(LOG_LEVELS)}."
            )

        if not self.git_executable:
            raise ConfigException("KOMMIT_GIT must name a git executable.")
