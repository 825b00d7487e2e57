"""Discover rotated log files for a prefix, oldest first."""

import os
from typing import Callable

from rotation_logger.models import LOG_SUFFIX, NAME_SUFFIX_LENGTH, LogFileEntry


def prefix_filter(prefix: str) -> Callable[[str], bool]:
    """Return a predicate matching ``<prefix>_<19-char stamp>.log`` names.

    Only the prefix, the fixed length and the ``.log`` suffix are checked;
    the timestamp characters themselves are not parsed.
    """
    head = prefix + "_"
    expected_length = len(head) + NAME_SUFFIX_LENGTH

    def matches(name: str) -> bool:
        return (
            len(name) == expected_length
            and name.startswith(head)
            and name.endswith(LOG_SUFFIX)
        )

    return matches


def list_rotated_files(directory: str, prefix: str) -> list[LogFileEntry]:
    """List rotated files in *directory* sorted by name.

    The timestamp is fixed-width and zero-padded, so name order is creation
    order. Raises OSError if the directory cannot be read.
    """
    matches = prefix_filter(prefix)
    names = sorted(name for name in os.listdir(directory) if matches(name))
    return [LogFileEntry(path=os.path.join(directory, name), name=name) for name in names]
