"""Allow ``python -m cftoken``."""

import sys

from cftoken.cli import main

if __name__ == "__main__":
    sys.exit(main())
