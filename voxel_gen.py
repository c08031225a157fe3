#!/usr/bin/env python
"""CLI entry point for voxgen."""

import sys

from voxgen.cli import main

if __name__ == "__main__":
    sys.exit(main())
