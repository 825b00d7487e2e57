"""Configuration module: frozen dataclass built from CLI flags and environment variables."""

import logging
import os
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

MIN_AGE_SECONDS = 10
MIN_SIZE_BYTES = 20
MIN_KEEP_COUNT = 1

DEFAULT_AGE = "1d"
DEFAULT_SIZE = "50M"
DEFAULT_KEEP = "40"

AGE_UNITS = {"": 1, "m": 60, "h": 3600, "d": 86400, "w": 604800}
SIZE_UNITS = {"": 1, "K": 1000, "M": 1000 * 1000, "G": 1000 * 1000 * 1000}

_QUANTITY_RE = re.compile(r"^(-?\d+)(.*)$")


class UsageError(ValueError):
    """Raised for malformed limits or missing parameters."""


def _parse_quantity(value: str, units: dict[str, int], what: str) -> int:
    match = _QUANTITY_RE.match(value.strip())
    if not match:
        raise UsageError(f"bad {what} value '{value}'")
    number, unit = match.groups()
    if unit not in units:
        raise UsageError(f"bad {what} modifier '{unit}'")
    return int(number) * units[unit]


def parse_age(value: str) -> int:
    """Parse ``N[m|h|d|w]`` into seconds, e.g. ``2h`` -> 7200."""
    return _parse_quantity(value, AGE_UNITS, "age limit")


def parse_size(value: str) -> int:
    """Parse ``N[K|M|G]`` into bytes (decimal multiples), e.g. ``10M`` -> 10000000."""
    return _parse_quantity(value, SIZE_UNITS, "size limit")


def parse_keep(value: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        raise UsageError(f"bad keep value '{value}'") from None


@dataclass(frozen=True)
class RotationConfig:
    directory: str
    prefix: str
    age_limit_seconds: int = 24 * 3600
    size_limit_bytes: int = 50 * 1000 * 1000
    keep_count: int = 40

    def __post_init__(self):
        # Frozen, so the minimums are applied through object.__setattr__.
        object.__setattr__(self, "age_limit_seconds", max(self.age_limit_seconds, MIN_AGE_SECONDS))
        object.__setattr__(self, "size_limit_bytes", max(self.size_limit_bytes, MIN_SIZE_BYTES))
        object.__setattr__(self, "keep_count", max(self.keep_count, MIN_KEEP_COUNT))


def load_config(directory: str, prefix: str, age: str | None = None, size: str | None = None,
                keep: str | None = None, environ=None) -> RotationConfig:
    """Build RotationConfig from explicit values, then environment, then defaults.

    Raises UsageError for malformed values or a missing directory/prefix.
    """
    env = os.environ if environ is None else environ
    if not directory or not prefix:
        raise UsageError("missing arguments")
    if os.sep in prefix:
        raise UsageError(f"prefix '{prefix}' must not contain '{os.sep}'")

    return RotationConfig(
        directory=directory,
        prefix=prefix,
        age_limit_seconds=parse_age(age if age is not None else env.get("ROTATION_AGE", DEFAULT_AGE)),
        size_limit_bytes=parse_size(size if size is not None else env.get("ROTATION_SIZE", DEFAULT_SIZE)),
        keep_count=parse_keep(keep if keep is not None else env.get("ROTATION_KEEP", DEFAULT_KEEP)),
    )


def load_log_level(environ=None) -> str:
    """Diagnostic log level from ROTATION_LOG_LEVEL, falling back to INFO."""
    env = os.environ if environ is None else environ
    level = env.get("ROTATION_LOG_LEVEL", "INFO").strip().upper()
    if level not in LOG_LEVELS:
        logger.warning("Invalid ROTATION_LOG_LEVEL '%s', falling back to 'INFO'", level)
        level = "INFO"
    return level
