"""Create the log directory and any missing parents (``mkdir -p``)."""

import errno
import logging
import os
import stat

logger = logging.getLogger(__name__)

DIRECTORY_MODE = 0o755


class DirectoryError(OSError):
    """Raised when a path segment cannot be created or is not a directory."""


def _make_dir(path: str, mode: int):
    try:
        st = os.stat(path)
    except FileNotFoundError:
        try:
            os.mkdir(path, mode)
        except FileExistsError:
            # Created by someone else between stat and mkdir.
            if not os.path.isdir(path):
                raise DirectoryError(errno.ENOTDIR, "Not a directory", path)
        except OSError as e:
            raise DirectoryError(e.errno, e.strerror, path) from e
        else:
            logger.debug("Created directory %s", path)
        return
    except OSError as e:
        raise DirectoryError(e.errno, e.strerror, path) from e

    if not stat.S_ISDIR(st.st_mode):
        raise DirectoryError(errno.ENOTDIR, "Not a directory", path)


def ensure_directory(path: str, mode: int = DIRECTORY_MODE):
    """Create *path* and every missing ancestor, each with *mode*.

    Existing directories are left alone, so calling this twice is harmless.
    Raises DirectoryError if any segment exists but is not a directory, or
    cannot be created.
    """
    if not path:
        raise DirectoryError(errno.ENOENT, "Empty directory path", path)

    # Walk each "/"-terminated prefix; skip the root and doubled separators.
    for index, char in enumerate(path):
        if char == os.sep and index > 0 and path[index - 1] != os.sep:
            _make_dir(path[:index], mode)
    _make_dir(path, mode)
