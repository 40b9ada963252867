#!/usr/bin/env python3
"""
CapCheck Batch Processing Entry Point

Validates all .srt and .vtt files in a directory, printing one JSON line
per failed check with the offending file attached.
"""

import sys
from capcheck.batch import run_batch

if __name__ == "__main__":
    sys.exit(run_batch())
