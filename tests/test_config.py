from datetime import timedelta
from pathlib import Path

import pytest

from pingmonke.config import (
    Config,
    TailmonkeConfig,
    default_log_dir,
    expand_home,
    load_config,
    prepare_log_directory,
    set_defaults,
)


@pytest.fixture
def home(tmp_path, monkeypatch):
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    monkeypatch.setenv("USERPROFILE", str(home_dir))
    return str(home_dir)


def test_default_log_dir_under_home(home):
    assert default_log_dir() == f"{home}/ping-logs"


def test_default_log_dir_without_home(monkeypatch):
    monkeypatch.delenv("HOME", raising=False)
    monkeypatch.delenv("USERPROFILE", raising=False)
    assert default_log_dir() == "/tmp/ping-logs"


def test_expand_home_variants(home):
    assert expand_home("~") == home
    assert expand_home("~/logs") == home + "/logs"
    assert expand_home("~other/logs") == "~other/logs"
    assert expand_home("/var/~/logs") == "/var/~/logs"
    assert expand_home("") == ""


def test_expand_home_without_home_keeps_path(monkeypatch):
    monkeypatch.delenv("HOME", raising=False)
    monkeypatch.delenv("USERPROFILE", raising=False)
    assert expand_home("~/logs") == "~/logs"


def test_missing_file_gives_defaults(home, tmp_path, capsys):
    cfg = load_config(tmp_path / "absent.yaml")
    assert cfg == Config()
    assert cfg.target == "google.com"
    assert cfg.log_dir == f"{home}/ping-logs"
    assert "Config file not found" in capsys.readouterr().out


def test_load_values_from_yaml(home, tmp_path, capsys):
    path = tmp_path / "config.yaml"
    path.write_text(
        "target: example.com\n"
        "log_dir: ~/pings\n"
        "interval: 1m30s\n"
        "debug_interval: 500ms\n"
        "port: 443\n"
        "use_icmp: true\n"
        "tailmonke:\n"
        "  lines_to_display: 42\n"
        "unknown_key: ignored\n",
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg.target == "example.com"
    assert cfg.log_dir == "~/pings"
    assert cfg.interval == timedelta(minutes=1, seconds=30)
    assert cfg.debug_interval == timedelta(milliseconds=500)
    assert cfg.port == 443
    assert cfg.use_icmp is True
    assert cfg.tailmonke == TailmonkeConfig(lines_to_display=42)
    assert "Loaded config from" in capsys.readouterr().out


def test_partial_yaml_keeps_other_defaults(home, tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("port: 8080\n", encoding="utf-8")
    cfg = load_config(path)
    defaults = Config()
    assert cfg.port == 8080
    assert cfg.target == defaults.target
    assert cfg.interval == defaults.interval
    assert cfg.tailmonke == defaults.tailmonke


def test_empty_yaml_gives_defaults(home, tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == Config()


def test_broken_yaml_gives_defaults(home, tmp_path, capsys):
    path = tmp_path / "config.yaml"
    path.write_text("target: [unclosed\n", encoding="utf-8")
    cfg = load_config(path)
    assert cfg == Config()
    assert "Error parsing YAML" in capsys.readouterr().out


def test_bad_duration_reports_error_but_keeps_other_fields(home, tmp_path, capsys):
    path = tmp_path / "config.yaml"
    path.write_text("target: example.com\ninterval: soon\n", encoding="utf-8")
    cfg = load_config(path)
    assert cfg.target == "example.com"
    assert cfg.interval == Config().interval
    assert "using defaults" in capsys.readouterr().out


def test_unitless_duration_is_rejected(home, tmp_path, capsys):
    path = tmp_path / "config.yaml"
    path.write_text("interval: '5'\n", encoding="utf-8")
    cfg = load_config(path)
    assert cfg.interval == Config().interval
    assert "Error parsing YAML" in capsys.readouterr().out


def test_set_defaults_fills_empty_log_dir(home):
    cfg = Config(log_dir="")
    set_defaults(cfg)
    assert cfg.log_dir == default_log_dir()


def test_set_defaults_keeps_existing_log_dir(home):
    cfg = Config(log_dir="/data/pings")
    set_defaults(cfg)
    assert cfg.log_dir == "/data/pings"


def test_prepare_log_directory_creates_expanded_dir(home, capsys):
    path = prepare_log_directory("~/logs/nested")
    assert path == home + "/logs/nested"
    assert Path(path).is_dir()
    assert "Log directory ready" in capsys.readouterr().out