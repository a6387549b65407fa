#!/usr/bin/env python3
"""
C++ Bridge Generator

Parses annotated C++ headers and generates, per header, an extern "C"
bridge file with handle, create/destroy and method-ID dispatch wrappers.

Usage:
    python generate_bridge.py --output generated/ --include include/ \\
        --headers include/impact/foo/bar.h include/impact/baz.h
"""

import sys
from pathlib import Path

# Add parent directory to path so bridgegen package can be found
sys.path.insert(0, str(Path(__file__).parent.parent))

from bridgegen.cli import main


if __name__ == "__main__":
    sys.exit(main())
