"""CLI entry point for finval.

Enables invocation via `python -m finval`.
"""

import sys

from finval.cli.app import app

if __name__ == "__main__":
    exit_code = app()
    sys.exit(exit_code if exit_code is not None else 0)
