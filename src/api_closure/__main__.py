"""
Entry point for module execution (``python -m api_closure``).

This module delegates execution to the CLI handler in ``api_closure.cli.__main__``.
"""

import sys
from api_closure.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
