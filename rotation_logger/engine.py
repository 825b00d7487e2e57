"""Tee loop: copy input to output and to the active log file, rotating on age or size."""

import logging
import time
from dataclasses import dataclass

from rotation_logger.config import RotationConfig
from rotation_logger.models import ActiveFile
from rotation_logger.rotator import FileRotator

logger = logging.getLogger(__name__)

CHUNK_SIZE = 2000
# Two rotations in the same second would produce the same file name.
MIN_ROTATION_AGE = 1


def should_rotate(age: float, bytes_written: int, age_limit: int, size_limit: int) -> bool:
    if age >= age_limit:
        return True
    return bytes_written >= size_limit and age >= MIN_ROTATION_AGE


@dataclass
class EngineStats:
    bytes_read: int = 0
    files_created: int = 0
    rotations: int = 0
    write_mismatches: int = 0


class RotationEngine:
    """Copies a binary input stream to an output stream and a rotating file set.

    Runs until end of input or an unrecoverable read error. A RotationError
    raised while opening the next file propagates to the caller; everything
    else the engine can recover from is logged and the copy continues.
    stop() ends the loop after the chunk in hand.
    """

    def __init__(self, config: RotationConfig, source, sink=None, rotator: FileRotator = None,
                 time_func=None, chunk_size: int = CHUNK_SIZE):
        self._config = config
        self._source = source
        self._sink = sink
        self._time_func = time_func or time.time
        self._rotator = rotator or FileRotator(
            config.directory, config.prefix, config.keep_count, time_func=self._time_func,
        )
        self._chunk_size = chunk_size
        self._active: ActiveFile | None = None
        self.stats = EngineStats()
        self._stopping = False
        self._in_read = False

    @property
    def active_file(self) -> ActiveFile | None:
        return self._active

    def start(self) -> ActiveFile:
        """Create the log directory and the first file, if not done already."""
        if self._active is None:
            self._active = self._rotator.start()
            self.stats.files_created += 1
        return self._active

    def run(self) -> EngineStats:
        self.start()
        try:
            while not self._stopping:
                chunk = self._read()
                if not chunk:
                    break
                self._copy(chunk)
                if self._rotation_due():
                    self._rotate()
        finally:
            self.close()
        return self.stats

    def stop(self) -> bool:
        """Finish after the chunk in hand instead of reading more.

        Returns True while the loop is blocked waiting for input; the caller
        must then interrupt that read, as nothing is in flight.
        """
        self._stopping = True
        return self._in_read

    def close(self):
        """Close the active file as is; no newline is forced at end of input."""
        if self._active is not None:
            self._active.close()
            self._active = None

    def _read(self) -> bytes:
        read = getattr(self._source, "read1", None) or self._source.read
        while True:
            self._in_read = True
            try:
                return read(self._chunk_size)
            except InterruptedError:
                continue
            except OSError as e:
                logger.error("Read error: %s", e)
                return b""
            finally:
                self._in_read = False

    def _copy(self, chunk: bytes):
        self.stats.bytes_read += len(chunk)
        echoed = self._echo(chunk)
        try:
            written = self._active.write(chunk)
        except OSError as e:
            logger.error("Write to %s failed: %s", self._active.path, e)
            written = 0

        # With echo off the file is compared against the chunk itself.
        expected = len(chunk) if echoed is None else echoed
        if written != expected:
            self.stats.write_mismatches += 1
            logger.warning("*** write mis-match %d/%d", expected, written)

    def _echo(self, chunk: bytes) -> int | None:
        """Write *chunk* to the output. Returns None once echo is disabled."""
        if self._sink is None:
            return None
        try:
            count = self._sink.write(chunk)
            self._sink.flush()
        except OSError as e:
            logger.warning("Output stream closed (%s), logging to file only", e)
            self._sink = None
            return 0
        return len(chunk) if count is None else count

    def _rotation_due(self) -> bool:
        age = self._active.age(self._time_func())
        return should_rotate(
            age, self._active.bytes_written,
            self._config.age_limit_seconds, self._config.size_limit_bytes,
        )

    def _rotate(self):
        previous = self._active
        self._active = None
        previous.close(terminate_line=True)
        logger.debug("Closed %s after %d bytes", previous.path, previous.bytes_written)

        self._active = self._rotator.rotate()
        self.stats.rotations += 1
        self.stats.files_created += 1
