import csv
from datetime import datetime, timedelta, timezone

import pytest

from pingmonke.config import Config
from pingmonke.logfile import prepare_log_file, write_to_csv
from pingmonke.summary import (
    PingRecord,
    detect_events,
    generate_summary,
    generate_summary_with_logging,
    is_bad_ping,
)

BASE = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def _ping(seconds, status, latency):
    return PingRecord(start_time=BASE + timedelta(seconds=seconds), status=status, latency=latency)


DEBUG_CASES = [
    ("no events", [_ping(0, "ok", 50), _ping(5, "ok", 50), _ping(10, "ok", 50)], 0),
    ("single bad", [_ping(0, "ok", 50), _ping(5, "timeout", 0), _ping(10, "ok", 50)], 0),
    (
        "two bad within 15s",
        [
            _ping(0, "ok", 50),
            _ping(5, "timeout", 0),
            _ping(10, "timeout", 0),
            _ping(15, "ok", 50),
            _ping(20, "ok", 50),
        ],
        1,
    ),
    (
        "high latency is bad",
        [_ping(0, "delayed", 100), _ping(5, "delayed", 150), _ping(10, "ok", 50)],
        1,
    ),
]

NORMAL_CASES = [
    ("no events", [_ping(0, "ok", 50), _ping(10, "ok", 50), _ping(20, "ok", 50)], 0),
    (
        "two bad within 60s",
        [
            _ping(0, "ok", 50),
            _ping(30, "timeout", 0),
            _ping(40, "timeout", 0),
            _ping(50, "ok", 50),
            _ping(60, "ok", 50),
        ],
        1,
    ),
    (
        "two bad more than 60s apart",
        [_ping(0, "timeout", 0), _ping(70, "timeout", 0), _ping(80, "ok", 50)],
        0,
    ),
]


@pytest.mark.parametrize("name, pings, expected", DEBUG_CASES, ids=[c[0] for c in DEBUG_CASES])
def test_event_detection_debug_mode(name, pings, expected):
    assert len(detect_events(pings, True)) == expected


@pytest.mark.parametrize("name, pings, expected", NORMAL_CASES, ids=[c[0] for c in NORMAL_CASES])
def test_event_detection_normal_mode(name, pings, expected):
    assert len(detect_events(pings, False)) == expected


@pytest.mark.parametrize(
    "ping, bad",
    [
        (PingRecord(status="ok", latency=50), False),
        (PingRecord(status="delayed", latency=99), False),
        (PingRecord(status="timeout", latency=0), True),
        (PingRecord(status="delayed", latency=100), True),
        (PingRecord(status="delayed", latency=150), True),
    ],
)
def test_is_bad_ping(ping, bad):
    assert is_bad_ping(ping) is bad


def test_event_running_to_end_of_data_spans_last_ping():
    pings = DEBUG_CASES[2][1]
    events = detect_events(pings, True)
    assert (events[0].start_index, events[0].end_index) == (1, 4)
    assert events[0].start_time == pings[1].start_time


def test_event_ends_after_window_of_good_pings_and_next_is_found():
    pings = [
        _ping(0, "timeout", 0),
        _ping(5, "timeout", 0),
        _ping(10, "ok", 50),
        _ping(25, "ok", 50),
        _ping(30, "timeout", 0),
        _ping(35, "timeout", 0),
    ]
    events = detect_events(pings, True)
    assert [(e.start_index, e.end_index) for e in events] == [(0, 3), (4, 5)]


def _write_log(tmp_path):
    start = datetime(2026, 1, 8, 16, 0, 0)
    path = prepare_log_file(start, Config(log_dir=str(tmp_path)))
    statuses = ["ok"] * 4 + ["timeout"] * 2 + ["ok"] * 6
    for index, status in enumerate(statuses):
        began = start + timedelta(seconds=15 * index)
        latency = timedelta(0) if status == "timeout" else timedelta(milliseconds=20)
        write_to_csv(path, began, began + timedelta(milliseconds=20), latency, status)
    return path


def _read_rows(path):
    with open(path, newline="", encoding="utf-8") as handle:
        return list(csv.reader(handle))


def test_generate_summary_file_contents(tmp_path):
    log = _write_log(tmp_path)
    message = generate_summary_with_logging(log, Config(), True)
    summary = str(tmp_path / "2026-01-08-pings-summary.csv")
    assert message == f"[Summary] Summary written to {summary}"

    rows = _read_rows(summary)
    assert rows[0] == ["Total", "OK", "Delayed", "Timeout", "Events"]
    assert rows[1] == ["12", "10", "0", "2", "1"]
    assert rows[2] == []
    assert rows[3] == ["Event 1"]
    assert rows[4] == ["Start", "2026-01-08 16:01:00.000"]
    assert rows[5] == ["End", "2026-01-08 16:02:30.020"]
    assert rows[6] == ["Duration", "1m30.02s"]
    assert rows[7] == []
    assert rows[8] == ["Ping Init", "Ping Rec", "Ping Time (ms)", "Status"]
    assert rows[9][0] == "* 2026-01-08 16:00:15.000"
    assert rows[12] == ["2026-01-08 16:01:00.000", "2026-01-08 16:01:00.020", "0", "timeout"]
    assert rows[18][0] == "2026-01-08 16:02:30.000"
    assert rows[19][0] == "* 2026-01-08 16:02:45.000"
    assert rows[20] == []
    assert len(rows) == 21


def test_generate_summary_prints_location(tmp_path, capsys):
    log = _write_log(tmp_path)
    assert generate_summary(log, Config()) is None
    assert "[Summary] Summary written to" in capsys.readouterr().out
    assert (tmp_path / "2026-01-08-pings-summary.csv").exists()


def test_generate_summary_without_events(tmp_path):
    start = datetime(2026, 1, 8)
    log = prepare_log_file(start, Config(log_dir=str(tmp_path)))
    write_to_csv(log, start, start, timedelta(milliseconds=10), "ok")
    generate_summary_with_logging(log, Config(), True)
    rows = _read_rows(str(tmp_path / "2026-01-08-pings-summary.csv"))
    assert rows == [["Total", "OK", "Delayed", "Timeout", "Events"], ["1", "1", "0", "0", "0"], []]


def test_generate_summary_missing_log(tmp_path, capsys):
    missing = str(tmp_path / "gone-pings.csv")
    message = generate_summary_with_logging(missing, Config(), True)
    assert message.startswith("[Summary] Error opening log file:")
    assert generate_summary_with_logging(missing, Config(), False) == ""
    assert "[Summary] Error opening log file:" in capsys.readouterr().out