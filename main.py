#!/usr/bin/env python3
"""
Kanto Battle - Python Edition

Thin wrapper around the command line demo in ``kanto.cli``.

To run: python main.py --trainer 10 --species 7 --level 14
"""

from kanto.cli import run

if __name__ == "__main__":
    raise SystemExit(run())
