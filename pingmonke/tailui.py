"""Interactive terminal view that follows a ping log as it grows."""

from __future__ import annotations

import os
import time

from blessed import Terminal

from .config import Config
from .event import EventStatus, detect_event
from .pinglog import (
    COLOR_GREEN,
    COLOR_RED,
    COLOR_RESET,
    COLOR_YELLOW,
    PingLine,
    get_column_widths,
    get_summary_stats,
    read_ping_file,
)
from .render import format_event_line, format_header, format_summary_line
from .summary import generate_summary_with_logging

_FILE_CHECK_SECONDS = 5.0
_NOTIFICATION_SECONDS = 5.0
_TICK_SECONDS = 1.0
_PINGS_SUFFIX = "-pings.csv"
_DIM = "\033[2m"
_RESERVED_ROWS = 4  # header, notification, summary and event lines
_MIN_DATA_ROWS = 3


class TailmonkeModel:
    """State of the log viewer: the rows on screen, statistics and notifications."""

    def __init__(
        self, file_path: str | os.PathLike[str], lines_to_display: int, explicit_file: bool = False
    ) -> None:
        self.file_path = os.fspath(file_path)
        self.log_dir = os.path.dirname(self.file_path) or "."
        self.lines_to_display = lines_to_display
        self.explicit_file = explicit_file
        self.lines: list[PingLine] = []
        self.width = 0
        self.height = 0
        self.last_error = ""
        self.last_refresh = time.time()
        self.summary_line = ""
        self.column_widths = get_column_widths([])
        self.new_file_path: str | None = None
        self.last_file_check = time.monotonic()
        self.last_notification = ""
        self.notification_time: float | None = None
        self.event_status = EventStatus()

    def resize(self, width: int, height: int) -> None:
        """Record the terminal size."""
        self.width = width
        self.height = height

    def load_file(self) -> None:
        """Reread the log, then refresh statistics and the event state."""
        try:
            lines = read_ping_file(self.file_path)
        except (OSError, ValueError) as exc:
            self.last_error = str(exc)
            lines = []
        else:
            self.last_error = ""
            self.column_widths = get_column_widths(lines)
        self.lines = lines
        self.last_refresh = time.time()
        self._update_summary()
        self._update_health()

    def handle_key(self, key: str) -> bool:
        """React to a key such as ``"q"``, ``"f5"`` or ``"ctrl+r"``; return True to quit."""
        if key in ("ctrl+c", "q"):
            return True
        if key in ("f5", "ctrl+r"):
            self.regenerate_summary()
            self.load_file()
        elif key in ("n", "N") and self.new_file_path:
            self.file_path = self.new_file_path
            self.new_file_path = None
            self.load_file()
        return False

    def tick(self) -> None:
        """Periodic work: reload a changed log and look for a newer one."""
        try:
            modified = os.stat(self.file_path).st_mtime
        except OSError:
            modified = None
        if modified is not None and modified > self.last_refresh - 1:
            self.load_file()
            return

        self._update_health()

        now = time.monotonic()
        if not self.explicit_file and now - self.last_file_check >= _FILE_CHECK_SECONDS:
            self.last_file_check = now
            newer = self.find_newer_log_file()
            if newer:
                self.new_file_path = newer

    def _notification_text(self) -> str:
        if self.new_file_path:
            name = os.path.basename(self.new_file_path)
            message = f"📢 New log file available: {name}  Press 'N' to switch"
            return f"{COLOR_YELLOW}{message}{COLOR_RESET}"
        if (
            self.last_notification
            and self.notification_time is not None
            and time.monotonic() - self.notification_time < _NOTIFICATION_SECONDS
        ):
            message = self.last_notification.replace("\n", " ")
            if len(message) > self.width - 1:
                message = message[: max(0, self.width - 4)] + "..."
            return f"{COLOR_YELLOW}{message}{COLOR_RESET}"
        return ""

    def view(self) -> str:
        """Render the whole screen as text."""
        if self.width == 0 or self.height == 0:
            return "Loading..."

        health_color = COLOR_RED if self.event_status.is_active else COLOR_GREEN
        rows_available = self.height - _RESERVED_ROWS
        if rows_available < _MIN_DATA_ROWS:
            return "Terminal too small"

        visible = self.lines[max(0, len(self.lines) - rows_available) :]
        screen = [format_header(health_color)]
        for line in visible:
            text = line.colored_line(self.column_widths)
            if self.new_file_path:
                text = f"{_DIM}{text}{COLOR_RESET}"
            screen.append(text)
        screen.extend("" for _ in range(rows_available - len(visible)))
        screen.append(self._notification_text())
        screen.append(self.summary_line)
        screen.append(format_event_line(self.event_status, health_color))

        output = "\n".join(screen)
        if self.last_error:
            output += f"\n{COLOR_RED}Error: {self.last_error}{COLOR_RESET}"
        return output

    def regenerate_summary(self) -> None:
        """Rewrite the summary file of the current log and show the outcome."""
        cfg = Config(debug_mode=False)
        self.last_notification = generate_summary_with_logging(self.file_path, cfg, True)
        self.notification_time = time.monotonic()

    def find_newer_log_file(self) -> str | None:
        """Return the newest ``*-pings.csv`` beside the current log that is newer than it."""
        try:
            with os.scandir(self.log_dir) as listing:
                entries = list(listing)
            current = os.stat(self.file_path).st_mtime_ns
        except OSError:
            return None

        newest_path: str | None = None
        newest_time: int | None = None
        for entry in entries:
            name = entry.name
            if len(name) <= len(_PINGS_SUFFIX) or not name.endswith(_PINGS_SUFFIX):
                continue
            try:
                if entry.is_dir():
                    continue
                modified = entry.stat().st_mtime_ns
            except OSError:
                continue
            if modified <= current or (newest_time is not None and modified <= newest_time):
                continue
            full_path = os.path.normpath(os.path.join(self.log_dir, name))
            if full_path != self.file_path:
                newest_path, newest_time = full_path, modified
        return newest_path

    def _update_summary(self) -> None:
        self.summary_line = format_summary_line(*get_summary_stats(self.file_path))

    def _update_health(self) -> None:
        self.event_status = detect_event(self.lines)


def _key_name(term: Terminal, key) -> str:
    if key.code == term.KEY_F5:
        return "f5"
    text = str(key)
    if text == "\x03":
        return "ctrl+c"
    if text == "\x12":
        return "ctrl+r"
    return text


def run_tailmonke_tui(
    file_path: str | os.PathLike[str], lines_to_display: int, explicit_file: bool = False
) -> None:
    """Run the full-screen viewer until the user quits."""
    term = Terminal()
    model = TailmonkeModel(file_path, lines_to_display, explicit_file)
    model.load_file()
    next_tick = time.monotonic() + _TICK_SECONDS
    with term.fullscreen(), term.cbreak(), term.hidden_cursor():
        try:
            while True:
                model.resize(term.width, term.height)
                print(term.home + term.clear + model.view(), end="", flush=True)
                key = term.inkey(timeout=max(0.0, next_tick - time.monotonic()))
                if key and model.handle_key(_key_name(term, key)):
                    break
                if time.monotonic() >= next_tick:
                    model.tick()
                    next_tick = time.monotonic() + _TICK_SECONDS
        except KeyboardInterrupt:
            pass