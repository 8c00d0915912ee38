"""
Per-day CSV output for received ticks.
"""

import csv
import logging
from pathlib import Path
from typing import List, Optional, TextIO

from intraday_tick.models import Tick

logger = logging.getLogger(__name__)

HEADER = ["TIME", "TYPE", "VALUE", "SIZE"]


def make_file_name(file_stem: str, day: str) -> str:
    """Build the output file name for a security stem and a YYYY-MM-DD day."""
    return f"{file_stem}_{day[:10]}.csv"


def format_row(tick: Tick) -> List[str]:
    """Format a tick as CSV fields: value with 3 decimals, size as plain integer."""
    return [tick.timestamp, tick.event_type, f"{tick.value:.3f}", str(tick.size)]


class CsvSink:
    """
    Append-only CSV writer that rotates files by calendar day.

    Only one file handle is open at a time. Files are opened lazily on the
    first tick and reopened whenever a tick's date differs from the date of
    the open file.
    """

    def __init__(self, file_stem: str, output_dir: Path = Path("."), write_header: bool = False):
        """
        Initialize the sink.

        Args:
            file_stem: Security with spaces replaced by dashes
            output_dir: Directory receiving the CSV files
            write_header: Write TIME,TYPE,VALUE,SIZE to files created by this sink
        """
        self.file_stem = file_stem
        self.output_dir = Path(output_dir)
        self.write_header = write_header
        self.current_date: Optional[str] = None
        self.ticks_written = 0
        self.files: List[Path] = []
        self._handle: Optional[TextIO] = None
        self._writer = None

    def __enter__(self):
        """Context manager entry."""
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit; always releases the open file."""
        self.close()

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    def open(self) -> None:
        """Prepare the output directory. Files themselves are opened on the first tick."""
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, day: str) -> Path:
        return self.output_dir / make_file_name(self.file_stem, day)

    def write(self, tick: Tick) -> None:
        """
        Append one tick, rotating to a new file when its date changes.

        Args:
            tick: Tick to write
        """
        if tick.date != self.current_date:
            self._rotate(tick.date)

        self._writer.writerow(format_row(tick))
        self.ticks_written += 1

    def close(self) -> None:
        """Close the open file, if any."""
        if self._handle is not None:
            self._handle.close()
            logger.debug(f"Closed output file for {self.current_date}")
        self._handle = None
        self._writer = None

    def _rotate(self, day: str) -> None:
        self.close()
        self.current_date = None

        path = self.path_for(day)
        is_new = not path.exists() or path.stat().st_size == 0
        self._handle = path.open("a", newline="", encoding="utf-8")
        self.current_date = day
        self._writer = csv.writer(self._handle, lineterminator="\n")

        if self.write_header and is_new:
            self._writer.writerow(HEADER)
        if path not in self.files:
            self.files.append(path)

        logger.info(f"Writing ticks for {day} to {path}")
