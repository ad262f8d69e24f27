"""Entry point for python -m emr."""

import sys

from emr.cli.main import main

if __name__ == "__main__":
    sys.exit(main())
