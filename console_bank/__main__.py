"""Entry point for ``python -m console_bank``"""

import sys

from .cli import main


if __name__ == "__main__":
    sys.exit(main())
