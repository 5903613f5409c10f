"""Reading ping CSV logs and laying them out as coloured table rows."""

from __future__ import annotations

import csv
import os
import re
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Sequence

from .event import parse_ping_time

COLOR_GREEN = "\033[32m"
COLOR_RED = "\033[31m"
COLOR_YELLOW = "\033[33m"
COLOR_MAGENTA = "\033[35m"
COLOR_RESET = "\033[0m"
COLOR_BOLD = "\033[1m"

_MIN_WIDTHS = (27, 27, 8)
_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


@dataclass
class PingLine:
    """One data row of a ping log."""

    start_time: str
    end_time: str
    latency: int
    status: str
    raw: list[str] = field(default_factory=list)

    def colored_line(self, widths: Sequence[int]) -> str:
        """Return the row padded to the given column widths and coloured by quality."""
        if self.status == "timeout":
            color = COLOR_RED
        elif self.latency >= 100:
            color = COLOR_YELLOW
        elif 0 < self.latency < 100:
            color = COLOR_GREEN
        else:
            color = COLOR_MAGENTA
        start_width, end_width, latency_width = widths[:3]
        latency = f"{self.latency}ms"
        return (
            f"{color}{self.start_time:<{start_width}} "
            f"{self.end_time:<{end_width}} "
            f"{latency:<{latency_width}} "
            f"{self.status:<12}{COLOR_RESET}"
        )


def _parse_int64(text: str) -> int:
    if not _INT_PATTERN.fullmatch(text):
        return 0
    return max(_INT64_MIN, min(_INT64_MAX, int(text)))


def _read_records(handle: Iterable[str]) -> list[list[str]]:
    records: list[list[str]] = []
    expected: int | None = None
    reader = csv.reader(handle)
    try:
        for row in reader:
            if not row:
                continue
            if expected is None:
                expected = len(row)
            elif len(row) != expected:
                raise ValueError(
                    f"record on line {reader.line_num}: wrong number of fields"
                )
            records.append(row)
    except csv.Error as exc:
        raise ValueError(str(exc)) from exc
    return records


def read_ping_file(file_path: str | os.PathLike[str]) -> list[PingLine]:
    """Read a ping log, skipping its header row.

    Raises OSError when the file cannot be opened and ValueError when it is
    empty or not well-formed CSV.
    """
    with open(file_path, newline="", encoding="utf-8", errors="replace") as handle:
        records = _read_records(handle)
    if not records:
        raise ValueError("empty file")
    return [
        PingLine(
            start_time=row[0],
            end_time=row[1],
            latency=_parse_int64(row[2]),
            status=row[3],
            raw=row,
        )
        for row in records[1:]
        if len(row) >= 4
    ]


def get_summary_stats(
    file_path: str | os.PathLike[str],
) -> tuple[int, int, int, int, float]:
    """Return ``(total, ok, delayed, timeout, average latency)`` for a log.

    Unreadable files give all zeros. The average leaves timeouts out.
    """
    try:
        lines = read_ping_file(file_path)
    except (OSError, ValueError):
        return 0, 0, 0, 0, 0.0
    counts = Counter(line.status for line in lines)
    latency_total = sum(line.latency for line in lines if line.status != "timeout")
    answered = counts["ok"] + counts["delayed"]
    average = latency_total / answered if answered else 0.0
    return len(lines), counts["ok"], counts["delayed"], counts["timeout"], average


def get_column_widths(lines: Iterable[PingLine]) -> tuple[int, int, int]:
    """Return column widths wide enough for every row, never below the header's."""
    start_width, end_width, latency_width = _MIN_WIDTHS
    for line in lines:
        start_width = max(start_width, len(line.start_time))
        end_width = max(end_width, len(line.end_time))
        latency_width = max(latency_width, len(f"{line.latency}ms"))
    return start_width, end_width, latency_width


def _format_millis(moment: datetime) -> str:
    return f"{moment:%Y-%m-%d %H:%M:%S}.{moment.microsecond // 1000:03d}"


def truncate_time(time_str: str) -> str:
    """Rewrite a timestamp as ``YYYY-MM-DD HH:MM:SS.mmm``; unparseable text is kept."""
    try:
        moment = parse_ping_time(time_str)
    except ValueError:
        return time_str
    return _format_millis(moment)