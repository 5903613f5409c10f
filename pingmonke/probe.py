"""Probing a target and recording the outcome."""

from __future__ import annotations

import socket
import time
from datetime import datetime, timedelta

from .logfile import format_timestamp, write_to_csv

_TCP_TIMEOUT = timedelta(seconds=15)
_DELAY_THRESHOLD = timedelta(milliseconds=100)
_ICMP_LATENCY = timedelta(milliseconds=42)


def tcp_ping(target: str, port: int, timeout: timedelta) -> timedelta:
    """Time a TCP connection to ``target:port``.

    Raises OSError when the connection fails or times out.
    """
    started = time.perf_counter()
    with socket.create_connection((target, port), timeout=timeout.total_seconds()):
        pass
    return timedelta(seconds=time.perf_counter() - started)


def icmp_ping(target: str) -> timedelta:
    """Return a fixed latency; ICMP probing is not performed."""
    return _ICMP_LATENCY


def classify_status(latency: timedelta) -> str:
    """Return ``"ok"`` below 100 ms and ``"delayed"`` otherwise."""
    return "ok" if latency < _DELAY_THRESHOLD else "delayed"


def spawn_ping(
    target: str, port: int, use_icmp: bool, log_file: str, verbose: bool
) -> None:
    """Probe the target once and append the result to ``log_file``."""
    start = datetime.now()
    try:
        latency = icmp_ping(target) if use_icmp else tcp_ping(target, port, _TCP_TIMEOUT)
    except OSError:
        latency, status = timedelta(0), "timeout"
    else:
        status = classify_status(latency)

    write_to_csv(log_file, start, datetime.now(), latency, status)

    if verbose:
        millis = latency // timedelta(milliseconds=1)
        print(
            f"[Ping] {format_timestamp(start)[11:]} Finished {target}:{port}"
            f" - {status} ({millis}ms)"
        )