#!/usr/bin/env python3
"""
Letter Ocean launcher.

Usage:
    python main.py
    python main.py --words "the tide writes slowly."
    python main.py --headless --frames 900 --words "hello there."
"""

import sys

from letterocean.cli import main

if __name__ == '__main__':
    sys.exit(main())
