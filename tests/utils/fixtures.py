"""
File helpers shared by sink and end-to-end tests.
"""

import csv
from pathlib import Path
from typing import List


def read_lines(path: Path) -> List[str]:
    with open(path, encoding="utf-8") as f:
        return f.read().splitlines()


def read_rows(path: Path) -> List[List[str]]:
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.reader(f))


def csv_files(directory: Path) -> List[str]:
    return sorted(p.name for p in Path(directory).glob("*.csv"))
