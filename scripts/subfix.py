"""Repair SubRip (.srt) subtitle files using PySubfix.

Run from a source checkout with `python scripts/subfix.py FILE [FILE ...] [options]`,
or use the `pysubfix` command installed with the package. See PySubfix.CommandLine
for the available options.
"""
from check_imports import check_required_imports
check_required_imports(['PySubfix', 'chardet', 'pysubs2', 'regex', 'srt'])

from PySubfix.CommandLine import main

if __name__ == '__main__':
    raise SystemExit(main())
