"""Retention enforcement: delete rotated files beyond the keep count."""

import logging
import os

from rotation_logger.scanner import list_rotated_files

logger = logging.getLogger(__name__)


def purge(directory: str, prefix: str, keep_count: int) -> list[str]:
    """Delete all but the *keep_count* newest rotated files.

    Returns the names actually deleted. A directory that cannot be scanned
    skips the purge; a file that cannot be deleted is reported and skipped.
    Neither is raised to the caller.
    """
    try:
        entries = list_rotated_files(directory, prefix)
    except OSError as e:
        logger.error("Cannot scan %s, skipping purge: %s", directory, e)
        return []

    excess = len(entries) - keep_count
    if excess <= 0:
        return []

    deleted = []
    for entry in entries[:excess]:
        try:
            os.remove(entry.path)
        except OSError as e:
            logger.warning("Could not delete %s: %s", entry.path, e)
            continue
        logger.info("Purged %s", entry.path)
        deleted.append(entry.name)
    return deleted
