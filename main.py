#!/usr/bin/env python3
"""
CapCheck Entry Point Script

This script initializes the CLI handler and validates a single caption file.
"""

import sys
from capcheck.cli import CLIHandler

if __name__ == "__main__":
    if sys.version_info < (3, 8):
        sys.stderr.write("CapCheck requires Python 3.8 or later.\n")
        sys.exit(1)

    cli = CLIHandler()
    sys.exit(cli.run())
