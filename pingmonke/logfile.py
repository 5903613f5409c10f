"""Writing ping results to per-period CSV log files."""

from __future__ import annotations

import csv
import os
import threading
from datetime import datetime, timedelta

from .config import Config, default_log_dir, expand_home

_HEADER = ["Ping Init", "Ping Rec", "Ping Time (ms)", "Status"]
_write_lock = threading.Lock()


def format_timestamp(t: datetime) -> str:
    """Return ``t`` as ``YYYY-MM-DD HH:MM:SS.mmm``."""
    return (
        f"{t.year:04d}-{t.month:02d}-{t.day:02d} "
        f"{t.hour:02d}:{t.minute:02d}:{t.second:02d}.{t.microsecond // 1000:03d}"
    )


def _milliseconds(span: timedelta) -> int:
    total = span // timedelta(microseconds=1)
    whole = abs(total) // 1000
    return -whole if total < 0 else whole


def prepare_log_file(period_start: datetime, cfg: Config) -> str:
    """Return the log file for a period, creating it with a header when needed.

    Problems are reported on standard output; the path is returned regardless.
    """
    log_dir = expand_home(cfg.log_dir or default_log_dir())
    stamp = format_timestamp(period_start)
    name = stamp[11:] if cfg.debug_mode else stamp[:10]
    filename = f"{log_dir}/{name}-pings.csv"

    try:
        os.makedirs(log_dir, mode=0o755, exist_ok=True)
    except OSError as exc:
        print(f"[Logging] Error creating log directory: {exc}")

    try:
        if os.path.getsize(filename) > 0:
            print(f"[Logging] Log file ready: {filename}")
            return filename
    except OSError:
        pass

    try:
        with open(filename, "w", newline="", encoding="utf-8") as handle:
            csv.writer(handle, lineterminator="\n").writerow(_HEADER)
    except OSError as exc:
        print(f"[Logging] Error creating log file: {exc}")
        return filename

    print(f"[Logging] Log file ready: {filename}")
    return filename


def write_to_csv(
    file: str, start: datetime, end: datetime, latency: timedelta, status: str
) -> None:
    """Append one ping result to an existing log file."""
    row = [
        format_timestamp(start),
        format_timestamp(end),
        str(_milliseconds(latency)),
        status,
    ]
    with _write_lock:
        try:
            descriptor = os.open(file, os.O_APPEND | os.O_WRONLY)
        except OSError as exc:
            print(f"[Logging] Error opening log file: {exc}")
            return
        with open(descriptor, "w", newline="", encoding="utf-8") as handle:
            csv.writer(handle, lineterminator="\n").writerow(row)