"""Command that shows a ping log, either interactively or as plain text."""

from __future__ import annotations

import argparse
import os
import sys
from typing import Sequence

from .config import expand_home, load_config
from .pinglog import COLOR_GREEN, get_column_widths, get_summary_stats, read_ping_file
from .render import format_header, format_summary_line
from .tailui import run_tailmonke_tui

_PINGS_SUFFIX = "-pings.csv"
_RULE = "-" * 70


def display_non_interactive(file_path: str, lines_to_display: int) -> None:
    """Print the last rows of a log and its statistics.

    Raises OSError or ValueError when the log cannot be read.
    """
    lines = read_ping_file(file_path)
    print(format_header(COLOR_GREEN))
    print(_RULE)
    shown = lines[max(0, len(lines) - lines_to_display) :]
    widths = get_column_widths(shown)
    for line in shown:
        print(line.colored_line(widths))
    print(_RULE)
    print(format_summary_line(*get_summary_stats(file_path)))


def find_most_recent_log_file(log_dir: str) -> str | None:
    """Return the most recently modified ``*-pings.csv`` in ``log_dir``, if any."""
    try:
        with os.scandir(log_dir) as listing:
            entries = list(listing)
    except OSError as exc:
        print(f"[Error] Could not read log directory {log_dir}: {exc}")
        return None

    candidates = []
    for entry in entries:
        name = entry.name
        if len(name) <= len(_PINGS_SUFFIX) or not name.endswith(_PINGS_SUFFIX):
            continue
        try:
            if entry.is_dir():
                continue
            candidates.append((entry.stat().st_mtime_ns, name))
        except OSError:
            continue

    if not candidates:
        return None
    _, newest = max(candidates)
    return os.path.join(log_dir, newest)


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tailmonke", description="Follow a ping log.")
    parser.add_argument("-file", "--file", dest="file", default="", help="Log file to tail")
    parser.add_argument(
        "-config", "--config", dest="config", default="config.yaml", help="Path to config file"
    )
    parser.add_argument(
        "-non-interactive",
        "--non-interactive",
        dest="non_interactive",
        action="store_true",
        help="Non-interactive mode (plain output)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Show the chosen or most recent log; return the exit status."""
    args = _parser().parse_args(argv)
    cfg = load_config(args.config)

    explicit_file = bool(args.file)
    file_path = args.file or find_most_recent_log_file(expand_home(cfg.log_dir))
    if not file_path:
        print("Error: No ping log file found")
        return 1

    lines_to_display = cfg.tailmonke.lines_to_display
    if args.non_interactive:
        try:
            display_non_interactive(file_path, lines_to_display)
        except (OSError, ValueError) as exc:
            print(f"Error reading file: {exc}")
            return 1
        return 0

    try:
        run_tailmonke_tui(file_path, lines_to_display, explicit_file)
    except OSError as exc:
        print(f"Error running TUI: {exc}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())