"""Detecting ongoing and past network events in a run of pings."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from itertools import islice, takewhile
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .pinglog import PingLine

WINDOW = 4
_BAD_STATUSES = frozenset({"timeout", "delayed"})

_RFC3339 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})"
)
_PLAIN = re.compile(r"(\d{4})-(\d{2})-(\d{2}) (\d{2}):(\d{2}):(\d{2})\.(\d{3})")


@dataclass
class EventStatus:
    """State of the most recent network event seen in a run of pings."""

    is_active: bool = False
    start_time: datetime | None = None
    end_time: datetime | None = None
    last_bad_ping: datetime | None = None
    latest_ping_time: datetime | None = None
    duration: timedelta = timedelta(0)


def _zone(text: str) -> timezone:
    if text == "Z":
        return timezone.utc
    sign = -1 if text[0] == "-" else 1
    hours, minutes = int(text[1:3]), int(text[4:6])
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def _to_datetime(match: re.Match[str], tz: timezone) -> datetime:
    year, month, day, hour, minute, second = (int(g) for g in match.groups()[:6])
    fraction = (match[7] or "")[:6].ljust(6, "0")
    return datetime(year, month, day, hour, minute, second, int(fraction), tzinfo=tz)


def parse_ping_time(time_str: str) -> datetime:
    """Parse an RFC 3339 or ``YYYY-MM-DD HH:MM:SS.mmm`` (UTC) timestamp.

    Raises ValueError when neither form fits.
    """
    match = _RFC3339.fullmatch(time_str)
    if match:
        try:
            return _to_datetime(match, _zone(match[8]))
        except ValueError:
            pass
    match = _PLAIN.fullmatch(time_str)
    if match:
        return _to_datetime(match, timezone.utc)
    raise ValueError(f"cannot parse {time_str!r} as a ping timestamp")


def _try_parse(time_str: str) -> datetime | None:
    try:
        return parse_ping_time(time_str)
    except ValueError:
        return None


def _is_bad(line: PingLine) -> bool:
    return line.status in _BAD_STATUSES


def _is_ok(line: PingLine) -> bool:
    return line.status == "ok"


def _span(start: datetime | None, end: datetime | None) -> timedelta:
    if start is None or end is None:
        return timedelta(0)
    return end - start


def _ok_run_ending_at(lines: Sequence[PingLine], index: int) -> int:
    """Count consecutive ok pings going backward from ``index``, up to WINDOW."""
    run = takewhile(_is_ok, reversed(lines[: index + 1]))
    return sum(1 for _ in islice(run, WINDOW))


def _find_most_recent_event_start(lines: Sequence[PingLine]) -> int | None:
    if len(lines) < 2:
        return None
    for end in range(len(lines) - 1, WINDOW - 2, -1):
        window = lines[end - WINDOW + 1 : end + 1]
        if sum(map(_is_bad, window)) < 2:
            continue
        start = end - WINDOW + 1
        for index in range(end, -1, -1):
            if _is_bad(lines[index]):
                start = index
            elif _ok_run_ending_at(lines, index) >= WINDOW or index == 0:
                break
        return start
    return None


def _detect_event_from_index(lines: Sequence[PingLine], start_index: int) -> EventStatus:
    latest = _try_parse(lines[-1].start_time)
    start = _try_parse(lines[start_index].start_time)

    bad_indices = [i for i in range(start_index, len(lines)) if _is_bad(lines[i])]
    if not bad_indices:
        return EventStatus(start_time=start, latest_ping_time=latest)

    bad_times = [t for t in (_try_parse(lines[i].start_time) for i in bad_indices) if t]
    last_bad = bad_times[-1] if bad_times else None

    following = lines[bad_indices[-1] + 1 :]
    recovery = list(islice(takewhile(_is_ok, following), WINDOW))
    if len(recovery) >= WINDOW:
        end = _try_parse(recovery[0].start_time)
        return EventStatus(
            is_active=False,
            start_time=start,
            end_time=end,
            last_bad_ping=last_bad,
            latest_ping_time=latest,
            duration=_span(start, end),
        )

    return EventStatus(
        is_active=True,
        start_time=start,
        last_bad_ping=last_bad,
        latest_ping_time=latest,
        duration=_span(start, latest),
    )


def detect_event(lines: Sequence[PingLine]) -> EventStatus:
    """Find the current or most recent network event.

    An event is active when two or more of the last four pings are bad. Otherwise
    the most recent cluster of bad pings is located by walking backward, and it is
    over once four consecutive ok pings follow its last bad ping.
    """
    if not lines:
        return EventStatus()

    latest = _try_parse(lines[-1].start_time)

    if len(lines) >= WINDOW:
        bad = [line for line in lines[-WINDOW:] if _is_bad(line)]
        if len(bad) >= 2:
            times = [t for t in (_try_parse(line.start_time) for line in bad) if t]
            start = min(times) if len(times) >= 2 else None
            return EventStatus(
                is_active=True,
                start_time=start,
                last_bad_ping=_try_parse(bad[-1].start_time),
                latest_ping_time=latest,
                duration=_span(start, latest),
            )

    start_index = _find_most_recent_event_start(lines)
    if start_index is None:
        return EventStatus(latest_ping_time=latest)
    return _detect_event_from_index(lines, start_index)