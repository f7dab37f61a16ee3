"""
Entry point for module execution (``python -m use_spray``).

This module delegates execution to the CLI handler in ``use_spray.cli.__main__``.
"""

import sys
from use_spray.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
