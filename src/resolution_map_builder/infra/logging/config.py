from __future__ import annotations

"""
Build logging settings.

A build logs its milestones to stderr and, optionally, to a rotating build
log that keeps the history of earlier runs next to the project.
"""

import logging
from dataclasses import dataclass
from typing import Optional

CONSOLE_FORMAT = "%(levelname)s | %(message)s"
BUILD_LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
BUILD_LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class LoggingConfig:
    """
    Attributes:
        debug: Report every classification decision, not only milestones.
        console: Mirror records to stderr.
        build_log: Path of the rotating build log, if any.
        build_log_max_bytes: Size at which the build log rolls over.
        build_log_backups: Rolled-over build logs to keep.
    """
    debug: bool = False
    console: bool = True
    build_log: Optional[str] = None
    build_log_max_bytes: int = 512 * 1024
    build_log_backups: int = 2

    @property
    def level(self) -> int:
        return logging.DEBUG if self.debug else logging.INFO

    @classmethod
    def for_cli(cls, debug: bool, log_file: Optional[str]) -> LoggingConfig:
        return cls(debug=bool(debug), console=True, build_log=log_file or None)
