"""Command that runs the ping scheduler."""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from .config import load_config, prepare_log_directory, set_defaults
from .scheduler import start_scheduler


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pingmonke", description="Ping a target on a schedule.")
    parser.add_argument("-v", dest="verbose", action="store_true", help="Enable verbose mode")
    parser.add_argument(
        "-debug-rollover",
        "--debug-rollover",
        dest="debug",
        action="store_true",
        help="Enable debug rollover mode",
    )
    parser.add_argument(
        "-config", "--config", dest="config", default="config.yaml", help="Path to config file"
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Load the configuration and run the scheduler."""
    args = _parser().parse_args(argv)

    cfg = load_config(args.config)
    cfg.verbose = args.verbose
    cfg.debug_mode = args.debug
    if cfg.debug_mode:
        cfg.verbose = True

    set_defaults(cfg)
    prepare_log_directory(cfg.log_dir)

    print("Starting pingmonke service...")
    start_scheduler(cfg)
    return 0


if __name__ == "__main__":
    sys.exit(main())