"""Rotation logger: copies stdin to stdout and to size/age limited, rotating log files."""

import sys

from rotation_logger.cli import main

if __name__ == "__main__":
    try:
        sys.exit(main())
    except BrokenPipeError:
        sys.exit(0)
