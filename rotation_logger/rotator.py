"""Produces the next active log file: purge, then create a time-stamped file."""

import logging
import os
import time

from rotation_logger.directory import ensure_directory
from rotation_logger.models import ActiveFile, log_filename
from rotation_logger.purger import purge

logger = logging.getLogger(__name__)

FILE_MODE = 0o644


class RotationError(OSError):
    """Raised when a new log file cannot be created."""


def _opener(path, flags):
    return os.open(path, flags, FILE_MODE)


class FileRotator:
    def __init__(self, directory: str, prefix: str, keep_count: int, time_func=None):
        self._directory = directory
        self._prefix = prefix
        self._keep_count = keep_count
        self._time_func = time_func or time.time

    def start(self) -> ActiveFile:
        """Ensure the log directory exists and open the first file."""
        ensure_directory(self._directory)
        return self.rotate()

    def rotate(self) -> ActiveFile:
        """Purge old files, then create and return a fresh active file."""
        purge(self._directory, self._prefix, self._keep_count)

        now = self._time_func()
        path = os.path.join(self._directory, log_filename(self._prefix, now))
        try:
            handle = open(path, "xb", buffering=0, opener=_opener)
        except FileExistsError:
            # Same-second restart: keep what is already there.
            logger.warning("%s already exists, appending to it", path)
            handle = self._open_existing(path)
        except OSError as e:
            raise RotationError(e.errno, f"Cannot create log file: {e.strerror}", path) from e

        logger.info("New log file: %s", path)
        return ActiveFile(path, handle, created_at=now)

    def _open_existing(self, path: str):
        try:
            return open(path, "ab", buffering=0, opener=_opener)
        except OSError as e:
            raise RotationError(e.errno, f"Cannot open log file: {e.strerror}", path) from e
