"""Sync log — the logging collaborator handed to the reconciler.

Every mutation is reported as a short ``<action> file://<path>`` line on a
standard-library logger and, when a log file is configured, appended to it
with a UTC timestamp.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


class SyncLog:
    """Reports sync activity to a logger and an optional log file."""

    def __init__(
        self,
        log_file: Optional[str | Path] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.log_file = Path(log_file) if log_file else None
        self.logger = logger or logging.getLogger(__name__)

    def log(self, fmt: str, *args) -> str:
        """Record an activity line and return the formatted message."""
        message = fmt % args if args else fmt
        self.logger.info(message)
        self._append(message)
        return message

    def error(self, message: str) -> None:
        self.logger.error(message)
        self._append(f"E {message}")

    def _append(self, message: str) -> None:
        if self.log_file is None:
            return
        self.log_file.parent.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).isoformat()
        with self.log_file.open("a", encoding="utf-8") as fh:
            fh.write(f"{stamp} {message}\n")
