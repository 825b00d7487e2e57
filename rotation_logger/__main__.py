import sys

from rotation_logger.cli import main

sys.exit(main())
