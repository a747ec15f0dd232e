#!/usr/bin/env python3
"""
Bharat Bank Console Entry Point

Starts the interactive single-account banking console.
"""

import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from console_bank.cli import main


if __name__ == "__main__":
    sys.exit(main())
