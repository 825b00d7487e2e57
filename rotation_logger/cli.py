"""rotation-logger: tee standard input into a rotating, size/age limited set of log files."""

import logging
import signal
import sys
from argparse import ArgumentParser, RawDescriptionHelpFormatter

from rotation_logger import __version__
from rotation_logger.config import UsageError, load_config, load_log_level
from rotation_logger.engine import RotationEngine
from rotation_logger.rotator import RotationError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_STARTUP = 2

DESCRIPTION = """\
This program provides a simple rotating logger. It is similar to tee, in that it
copies from standard input to standard output and also to a log file. Unlike tee,
the file size and/or file age is limited, and when the size or age exceeds the
specified thresholds, a new file is created and output is directed to that file.
"""

EPILOG = """\
parameters:
  directory     the location (relative or absolute) where the log files are to be
                created. If the directory does not exist it is created, as if by
                mkdir -p '<directory>'.
  prefix        the filename prefix given to the log files. Full file names are of
                the form <directory>/<prefix>_YYYY-MM-DD_HH-MM-SS.log

environment:
  ROTATION_AGE, ROTATION_SIZE, ROTATION_KEEP   defaults for --age, --size, --keep
  ROTATION_LOG_LEVEL                           diagnostic verbosity (default INFO)
"""

WARRANTY = """\
rotation_logger is distributed in the hope that it will be useful, but WITHOUT ANY
WARRANTY; without even the implied warranty of MERCHANTABILITY or FITNESS FOR A
PARTICULAR PURPOSE. See the GNU General Public License for more details.

You should have received a copy of the GNU General Public License along with
rotation_logger. If not, see <http://www.gnu.org/licenses/>."""


class _UsageParser(ArgumentParser):
    """ArgumentParser that reports bad arguments with exit status 1."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EXIT_USAGE, f"{self.prog}: error: {message}\n")


def build_parser() -> ArgumentParser:
    """Build the CLI argument parser."""
    parser = _UsageParser(
        prog="rotation_logger",
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=RawDescriptionHelpFormatter,
    )
    parser.add_argument("directory", nargs="?", help="Directory that holds the log files")
    parser.add_argument("prefix", nargs="?", help="File name prefix of the log files")
    parser.add_argument(
        "--age", "-a",
        metavar="AGE",
        help="Age limit of each file in seconds, or minutes/hours/days/weeks "
             "with a suffix (default: 1d, minimum 10s)",
    )
    parser.add_argument(
        "--size", "-s",
        metavar="SIZE",
        help="Size limit of each file in bytes, or kilo/mega/giga bytes with a "
             "suffix (default: 50M, minimum 20 bytes)",
    )
    parser.add_argument(
        "--keep", "-k",
        metavar="N",
        help="Number of files to keep in addition to the current file "
             "(default: 40, minimum 1)",
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"rotation_logger version {__version__}",
        help="Show program version and exit",
    )
    parser.add_argument(
        "--warranty", "-w",
        action="store_true",
        help="Show warranty information and exit",
    )
    return parser


def _configure_logging(level: str):
    logging.basicConfig(
        level=level,
        format="%(asctime)s [rotation-logger] %(levelname)s %(message)s",
        stream=sys.stderr,
    )


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.warranty:
        print(WARRANTY)
        return EXIT_OK

    _configure_logging(load_log_level())

    try:
        config = load_config(args.directory, args.prefix, args.age, args.size, args.keep)
    except UsageError as e:
        print(f"{parser.prog}: error: {e}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return EXIT_USAGE

    logger.info("Rotation Logger %s/%s", config.directory, config.prefix)
    logger.info(
        "Config: age limit=%d secs, size limit=%d bytes, keep=%d",
        config.age_limit_seconds, config.size_limit_bytes, config.keep_count,
    )

    engine = RotationEngine(config, source=sys.stdin.buffer, sink=sys.stdout.buffer)

    def _shutdown(signum, _frame):
        logger.info("Shutdown signal received (signal %d), stopping...", signum)
        # Only a blocked read is interrupted; a chunk in hand is always
        # written to both the output and the file.
        if engine.stop():
            raise KeyboardInterrupt

    signal.signal(signal.SIGINT, _shutdown)
    signal.signal(signal.SIGTERM, _shutdown)

    try:
        engine.start()
    except OSError as e:
        logger.error("Startup failed: %s", e)
        return EXIT_STARTUP

    try:
        stats = engine.run()
    except RotationError as e:
        logger.error("Cannot continue without a log file: %s", e)
        return EXIT_STARTUP
    except KeyboardInterrupt:
        stats = engine.stats

    logger.info(
        "Shut down cleanly: %d bytes copied, %d file(s) created, %d write mismatch(es)",
        stats.bytes_read, stats.files_created, stats.write_mismatches,
    )
    return EXIT_OK
