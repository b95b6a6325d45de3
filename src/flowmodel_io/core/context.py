"""Console output modes."""

from __future__ import annotations

from enum import Enum


class OutputMode(Enum):
    """Controls how much the command line prints."""
    QUIET = 0   # Warnings and errors only (for scripts, piped output)
    NORMAL = 1  # Results and status messages (default)
    DEBUG = 2   # Everything + every import attempt
