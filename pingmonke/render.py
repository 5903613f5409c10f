"""Header, summary and event lines shown by the log viewer."""

from __future__ import annotations

from datetime import timedelta

from .event import EventStatus
from .pinglog import (
    COLOR_GREEN,
    COLOR_MAGENTA,
    COLOR_RED,
    COLOR_RESET,
    COLOR_YELLOW,
)

_HEADER_BACKGROUNDS = {COLOR_RED: "160", COLOR_YELLOW: "136"}
_DEFAULT_BACKGROUND = "22"
_HEADER_COLUMNS = ("Ping Init", "Ping Rec", "Time", "Status")
_STATUS_CIRCLES = {COLOR_RED: "●", COLOR_YELLOW: "◐"}
_IDLE_CIRCLE = "○"

_NS_PER_SECOND = 10**9


def _nanoseconds(span: timedelta) -> int:
    return (span.days * 86400 + span.seconds) * _NS_PER_SECOND + span.microseconds * 1000


def _fraction(value: int, scale: int) -> str:
    whole, part = divmod(value, scale)
    text = str(whole)
    if part:
        digits = len(str(scale)) - 1
        text += "." + f"{part:0{digits}d}".rstrip("0")
    return text


def _duration_text(span: timedelta) -> str:
    """Render a span the way durations are written in logs, e.g. ``1m30.5s``."""
    total = _nanoseconds(span)
    if total == 0:
        return "0s"
    sign = "-" if total < 0 else ""
    magnitude = abs(total)
    if magnitude < _NS_PER_SECOND:
        if magnitude < 1000:
            return f"{sign}{magnitude}ns"
        if magnitude < 10**6:
            return f"{sign}{_fraction(magnitude, 1000)}µs"
        return f"{sign}{_fraction(magnitude, 10**6)}ms"
    whole_seconds, remainder = divmod(magnitude, _NS_PER_SECOND)
    hours, rest = divmod(whole_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    text = f"{_fraction(seconds * _NS_PER_SECOND + remainder, _NS_PER_SECOND)}s"
    if hours or minutes:
        text = f"{minutes}m{text}"
    if hours:
        text = f"{hours}h{text}"
    return sign + text


def _round_to_second(span: timedelta) -> timedelta:
    total = span // timedelta(microseconds=1)
    seconds, remainder = divmod(abs(total), 10**6)
    if remainder * 2 >= 10**6:
        seconds += 1
    return timedelta(seconds=-seconds if total < 0 else seconds)


def format_header(health_color: str) -> str:
    """Return the table header on a background matching the health colour."""
    background = _HEADER_BACKGROUNDS.get(health_color, _DEFAULT_BACKGROUND)
    start, end, latency, status = _HEADER_COLUMNS
    text = f"{start:<27} {end:<27} {latency:<8} {status:<12}"
    return f"\033[1;48;5;{background}m{text}{COLOR_RESET}"


def format_summary_line(
    total: int, ok: int, delayed: int, timeout: int, avg_latency: float
) -> str:
    """Return the coloured statistics line shown under the table."""
    if timeout > 0:
        total_color = COLOR_RED
    elif delayed > 0:
        total_color = COLOR_YELLOW
    else:
        total_color = COLOR_GREEN

    if avg_latency >= 100:
        avg_color = COLOR_YELLOW
    elif avg_latency > 0:
        avg_color = COLOR_GREEN
    else:
        avg_color = COLOR_MAGENTA

    return (
        f"{total_color}Total: {total}{COLOR_RESET} | "
        f"{COLOR_GREEN}OK: {ok}{COLOR_RESET} | "
        f"{COLOR_YELLOW}Delayed: {delayed}{COLOR_RESET} | "
        f"{COLOR_RED}Timeout: {timeout}{COLOR_RESET} | "
        f"{avg_color}Avg: {avg_latency:.0f}ms{COLOR_RESET}"
    )


def format_event_line(event: EventStatus, health_color: str) -> str:
    """Return the event status line with a marker and the event's duration."""
    circle = _STATUS_CIRCLES.get(health_color, _IDLE_CIRCLE)
    color = health_color if health_color in _STATUS_CIRCLES else COLOR_GREEN

    if event.is_active:
        duration = f"Current Event Duration: {_duration_text(_round_to_second(event.duration))}"
    elif event.end_time is not None:
        duration = f"Last Event Duration: {_duration_text(_round_to_second(event.duration))}"
    else:
        duration = "Last Event Duration: N/A"

    return f"Event: {color}{circle}{COLOR_RESET} | {color}{duration}{COLOR_RESET}"