"""Scheduled TCP connectivity probes with CSV logs per period, event summaries and a live log viewer."""

__version__ = "0.1.0"