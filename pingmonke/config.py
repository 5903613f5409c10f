"""Settings for the ping scheduler and the log viewer."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable

import yaml

_FALLBACK_LOG_DIR = "/tmp/ping-logs"

_DURATION_UNITS = {
    "ns": Decimal(1),
    "us": Decimal(10**3),
    "µs": Decimal(10**3),
    "μs": Decimal(10**3),
    "ms": Decimal(10**6),
    "s": Decimal(10**9),
    "m": Decimal(60 * 10**9),
    "h": Decimal(3600 * 10**9),
}
_DURATION_PART = re.compile(r"(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


def _home_dir() -> str | None:
    variable = "USERPROFILE" if os.name == "nt" else "HOME"
    return os.environ.get(variable) or None


def default_log_dir() -> str:
    """Return ``$HOME/ping-logs``, or a temporary location without a home."""
    home = _home_dir()
    if home is None:
        return _FALLBACK_LOG_DIR
    return f"{home}/ping-logs"


def expand_home(path: str) -> str:
    """Replace a leading ``~`` or ``~/`` with the user's home directory."""
    if not path.startswith("~"):
        return path
    home = _home_dir()
    if home is None:
        return path
    if path == "~":
        return home
    if path[1] == "/":
        return home + path[1:]
    return path


@dataclass
class TailmonkeConfig:
    """Settings of the log viewer."""

    lines_to_display: int = 20


@dataclass
class Config:
    """Global settings for the ping scheduler."""

    target: str = "google.com"
    log_dir: str = field(default_factory=default_log_dir)
    interval: timedelta = timedelta(seconds=15)
    debug_interval: timedelta = timedelta(seconds=5)
    port: int = 80
    use_icmp: bool = False
    tailmonke: TailmonkeConfig = field(default_factory=TailmonkeConfig)
    verbose: bool = False
    debug_mode: bool = False


def _parse_duration(text: str) -> timedelta:
    body = text
    negative = body.startswith("-")
    if body[:1] in ("+", "-") and body:
        body = body[1:]
    if body == "0":
        return timedelta(0)
    if not body:
        raise ValueError(f"invalid duration {text!r}")
    total = Decimal(0)
    position = 0
    while position < len(body):
        match = _DURATION_PART.match(body, position)
        if match is None:
            raise ValueError(f"invalid duration {text!r}")
        total += Decimal(match[1]) * _DURATION_UNITS[match[2]]
        position = match.end()
    if negative:
        total = -total
    return timedelta(microseconds=int(total / 1000))


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        raise ValueError(f"cannot use {value!r} as a string")
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _as_int(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, bool):
        raise ValueError(f"cannot use {value!r} as an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise ValueError(f"cannot use {value!r} as an integer")


def _as_bool(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    raise ValueError(f"cannot use {value!r} as a boolean")


def _as_duration(value: Any) -> timedelta:
    if value is None:
        return timedelta(0)
    if isinstance(value, str):
        return _parse_duration(value)
    raise ValueError(f"cannot use {value!r} as a duration")


def _as_tailmonke(value: Any) -> TailmonkeConfig:
    if value is None:
        return TailmonkeConfig(lines_to_display=0)
    if not isinstance(value, dict):
        raise ValueError(f"cannot use {value!r} as tailmonke settings")
    settings = TailmonkeConfig()
    if "lines_to_display" in value:
        settings.lines_to_display = _as_int(value["lines_to_display"])
    return settings


_FIELDS: dict[str, tuple[str, Callable[[Any], Any]]] = {
    "target": ("target", _as_str),
    "log_dir": ("log_dir", _as_str),
    "interval": ("interval", _as_duration),
    "debug_interval": ("debug_interval", _as_duration),
    "port": ("port", _as_int),
    "use_icmp": ("use_icmp", _as_bool),
    "tailmonke": ("tailmonke", _as_tailmonke),
    "verbose": ("verbose", _as_bool),
    "debugmode": ("debug_mode", _as_bool),
}


def _apply_yaml(cfg: Config, data: bytes) -> None:
    document = yaml.safe_load(data)
    if document is None:
        return
    if not isinstance(document, dict):
        raise ValueError("configuration document is not a mapping")
    errors = []
    for key, value in document.items():
        if key == "tailmonke" and isinstance(value, dict):
            try:
                if "lines_to_display" in value:
                    cfg.tailmonke.lines_to_display = _as_int(value["lines_to_display"])
            except ValueError as exc:
                errors.append(f"tailmonke.lines_to_display: {exc}")
            continue
        target = _FIELDS.get(key) if isinstance(key, str) else None
        if target is None:
            continue
        attribute, convert = target
        try:
            setattr(cfg, attribute, convert(value))
        except ValueError as exc:
            errors.append(f"{key}: {exc}")
    if errors:
        raise ValueError("; ".join(errors))


def load_config(path: str | os.PathLike[str]) -> Config:
    """Read a YAML config file, falling back to defaults where it cannot be used."""
    cfg = Config()
    try:
        data = Path(path).read_bytes()
    except FileNotFoundError:
        print(f"[Config] Config file not found at {path}, using defaults")
        return cfg
    except OSError as exc:
        print(f"[Config] Error reading config file: {exc}")
        return cfg

    try:
        _apply_yaml(cfg, data)
    except (yaml.YAMLError, ValueError) as exc:
        print(f"[Config] Error parsing YAML: {exc}, using defaults")
        return cfg

    print(f"[Config] Loaded config from {path}")
    return cfg


def set_defaults(cfg: Config) -> None:
    """Fill in a log directory when none is set."""
    if not cfg.log_dir:
        cfg.log_dir = default_log_dir()


def prepare_log_directory(directory: str) -> str:
    """Make sure the log directory exists and return its expanded path."""
    path = expand_home(directory)
    try:
        os.makedirs(path, mode=0o755, exist_ok=True)
    except OSError as exc:
        print(f"[Setup] Error creating log directory: {exc}")
    else:
        print(f"[Setup] Log directory ready: {path}")
    return path