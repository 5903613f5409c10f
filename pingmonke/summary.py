"""Per-period summary files listing counts and network events."""

from __future__ import annotations

import csv
import re
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Sequence

from .config import Config
from .event import parse_ping_time
from .logfile import format_timestamp
from .render import _duration_text

_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)
_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_HEADER = ["Ping Init", "Ping Rec", "Ping Time (ms)", "Status"]
_CONTEXT = 3


@dataclass
class PingRecord:
    """One ping read back from a log file."""

    start_time: datetime = _ZERO_TIME
    end_time: datetime = _ZERO_TIME
    latency: int = 0
    status: str = ""


@dataclass
class Event:
    """A span of degraded pings, as indices into the ping list and times."""

    start_index: int
    end_index: int
    start_time: datetime
    end_time: datetime


def is_bad_ping(ping: PingRecord) -> bool:
    """A ping is bad when it timed out or took 100 ms or more."""
    return ping.status == "timeout" or ping.latency >= 100


def detect_events(pings: Sequence[PingRecord], debug_mode: bool) -> list[Event]:
    """Find events: two consecutive bad pings within the window start one, and a
    window's worth of good pings ends it (15 s in debug mode, 60 s otherwise)."""
    window = timedelta(seconds=15 if debug_mode else 60)
    events: list[Event] = []
    count = len(pings)
    position = 0

    while position < count:
        event_start = next(
            (
                j
                for j in range(position, count - 1)
                if is_bad_ping(pings[j])
                and is_bad_ping(pings[j + 1])
                and pings[j + 1].start_time - pings[j].start_time <= window
            ),
            None,
        )
        if event_start is None:
            break

        event_end = event_start
        good_count = 0
        good_start = _ZERO_TIME
        for j in range(event_start, count):
            if is_bad_ping(pings[j]):
                good_count = 0
                event_end = j
                continue
            if good_count == 0:
                good_start = pings[j].start_time
            good_count += 1
            if good_start + window <= pings[j].start_time:
                events.append(
                    Event(event_start, j, pings[event_start].start_time, pings[j].end_time)
                )
                position = j + 1
                break
        else:
            events.append(
                Event(
                    event_start,
                    count - 1,
                    pings[event_start].start_time,
                    pings[-1].end_time,
                )
            )
            break

    return events


def _parse_time(text: str) -> datetime:
    try:
        return parse_ping_time(text)
    except ValueError:
        return _ZERO_TIME


def _parse_latency(text: str) -> int:
    return int(text) if _INT_PATTERN.fullmatch(text) else 0


def _record(row: list[str]) -> PingRecord:
    return PingRecord(
        start_time=_parse_time(row[0]),
        end_time=_parse_time(row[1]),
        latency=_parse_latency(row[2]),
        status=row[3],
    )


def _event_rows(index: int, event: Event, pings: Sequence[PingRecord]) -> list[list[str]]:
    rows = [
        [f"Event {index}"],
        ["Start", format_timestamp(event.start_time)],
        ["End", format_timestamp(event.end_time)],
        ["Duration", _duration_text(event.end_time - event.start_time)],
        [],
        list(_HEADER),
    ]
    first = max(0, event.start_index - _CONTEXT)
    last = min(len(pings) - 1, event.end_index + _CONTEXT)
    for j in range(first, last + 1):
        ping = pings[j]
        inside = event.start_index <= j <= event.end_index
        prefix = "" if inside else "* "
        rows.append(
            [
                prefix + format_timestamp(ping.start_time),
                format_timestamp(ping.end_time),
                str(ping.latency),
                ping.status,
            ]
        )
    rows.append([])
    return rows


def generate_summary_with_logging(log_file: str, cfg: Config, return_message: bool) -> str:
    """Write ``<log>-summary.csv`` next to a log file.

    The outcome is returned when ``return_message`` is true and printed (with an
    empty string returned) otherwise.
    """

    def report(message: str) -> str:
        if return_message:
            return message
        print(message)
        return ""

    try:
        with open(log_file, newline="", encoding="utf-8", errors="replace") as handle:
            rows = [row for row in csv.reader(handle) if row]
    except OSError as exc:
        return report(f"[Summary] Error opening log file: {exc}")
    except csv.Error as exc:
        return report(f"[Summary] Error reading log file: {exc}")

    pings = [_record(row) for row in rows[1:] if len(row) >= 4]
    counts = Counter(ping.status for ping in pings)
    events = detect_events(pings, cfg.debug_mode)

    summary_file = str(log_file)[:-4] + "-summary.csv"
    output = [
        ["Total", "OK", "Delayed", "Timeout", "Events"],
        [
            str(len(pings)),
            str(counts["ok"]),
            str(counts["delayed"]),
            str(counts["timeout"]),
            str(len(events)),
        ],
        [],
    ]
    for number, event in enumerate(events, start=1):
        output.extend(_event_rows(number, event, pings))

    try:
        with open(summary_file, "w", newline="", encoding="utf-8") as handle:
            csv.writer(handle, lineterminator="\n").writerows(output)
    except OSError as exc:
        return report(f"[Summary] Error creating summary file: {exc}")

    return report(f"[Summary] Summary written to {summary_file}")


def generate_summary(log_file: str, cfg: Config) -> None:
    """Write the summary file for a log and print where it went."""
    generate_summary_with_logging(log_file, cfg, False)