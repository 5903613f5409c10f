"""Running pings on a fixed schedule, one log file per period."""

from __future__ import annotations

import threading
import time
from datetime import datetime, timedelta, timezone

from .config import Config
from .logfile import prepare_log_file
from .probe import spawn_ping
from .summary import generate_summary

_ROLLOVER_GRACE = timedelta(milliseconds=100)


def _now_like(reference: datetime) -> datetime:
    return datetime.now(reference.tzinfo) if reference.tzinfo else datetime.now()


def _trunc_div(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


def calculate_period(cfg: Config) -> tuple[datetime, datetime]:
    """Return the current period: the minute in debug mode, else the UTC day."""
    if cfg.debug_mode:
        start = datetime.now().astimezone().replace(second=0, microsecond=0)
        return start, start + timedelta(seconds=60)
    midnight = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
    start = midnight.astimezone()
    return start, start + timedelta(hours=24)


def align_to_schedule(base: datetime, interval: timedelta) -> datetime:
    """Return the next whole-second interval boundary after now, counted from ``base``."""
    elapsed = int((_now_like(base) - base).total_seconds())
    steps = _trunc_div(elapsed, int(interval.total_seconds()))
    return base + (steps + 1) * interval


def sleep_until(t: datetime) -> None:
    """Block until ``t``; return at once if it has passed."""
    time.sleep(max(0.0, (t - _now_like(t)).total_seconds()))


def max_time(a: datetime, b: datetime) -> datetime:
    """Return the later of two times, preferring ``b`` when they are equal."""
    return a if a > b else b


def start_scheduler(cfg: Config) -> None:
    """Ping the target on schedule forever, summarising each finished period."""
    interval = cfg.debug_interval if cfg.debug_mode else cfg.interval

    while True:
        period_start, period_end = calculate_period(cfg)
        log_file = prepare_log_file(period_start, cfg)
        print(f"[Scheduler] New period: {period_start} to {period_end}")

        workers: list[threading.Thread] = []
        while _now_like(period_end) < period_end:
            next_ping = align_to_schedule(period_start, interval)
            sleep_until(max_time(_now_like(next_ping), next_ping))
            worker = threading.Thread(
                target=spawn_ping,
                args=(cfg.target, cfg.port, cfg.use_icmp, log_file, cfg.verbose),
                daemon=True,
            )
            worker.start()
            workers.append(worker)

        for worker in workers:
            worker.join()
        generate_summary(log_file, cfg)

        sleep_until(period_end + _ROLLOVER_GRACE)