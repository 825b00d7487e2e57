"""Rotated log file naming and the active-file record."""

import os
import time
from dataclasses import dataclass

TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"
LOG_SUFFIX = ".log"
# "YYYY-MM-DD_HH-MM-SS" + ".log"
NAME_SUFFIX_LENGTH = 23


def log_filename(prefix: str, when: float) -> str:
    """Return ``<prefix>_YYYY-MM-DD_HH-MM-SS.log`` for local time *when*."""
    stamp = time.strftime(TIMESTAMP_FORMAT, time.localtime(when))
    return f"{prefix}_{stamp}{LOG_SUFFIX}"


@dataclass(frozen=True)
class LogFileEntry:
    path: str
    name: str


class ActiveFile:
    """The single log file currently receiving writes.

    Tracks the creation time, the number of bytes written since creation and
    the last byte written, so the file can be newline-terminated when it is
    rotated out.
    """

    def __init__(self, path: str, handle, created_at: float):
        self.path = path
        self.created_at = created_at
        self.bytes_written = 0
        self.last_byte = b"\n"
        self._handle = handle

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    @property
    def closed(self) -> bool:
        return self._handle is None

    def age(self, now: float) -> float:
        return now - self.created_at

    def write(self, chunk: bytes) -> int:
        """Write *chunk* and return the number of bytes the file accepted."""
        if not chunk:
            return 0
        written = self._handle.write(chunk) or 0
        self.bytes_written += written
        self.last_byte = chunk[-1:]
        return written

    def close(self, terminate_line: bool = False):
        """Close the file, first appending a newline if *terminate_line* is set
        and the last byte written was not one."""
        if self._handle is None:
            return
        try:
            if terminate_line and self.last_byte != b"\n":
                self._handle.write(b"\n")
                self.last_byte = b"\n"
        finally:
            self._handle.close()
            self._handle = None
