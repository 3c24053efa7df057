"""Utility helpers for the Strava distance client.

Currently contains the logging configuration helper used by the CLI.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path


def configure_logging(verbose: bool = False, log_file: str | Path | None = None, truncate: bool = False) -> None:
    """Configure the root logger for console and, optionally, file output.

    The console handler writes to stderr so stdout only carries results. It
    shows WARNING+ by default and everything from DEBUG up when ``verbose``
    is set. If ``log_file`` is given a DEBUG-level file handler is added; with
    ``truncate`` the file is emptied first.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove existing handlers to avoid duplicates
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    ch = logging.StreamHandler(sys.stderr)
    ch.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    ch.setLevel(logging.DEBUG if verbose else logging.WARNING)
    root.addHandler(ch)

    if log_file:
        log_path = Path(log_file)
        if log_path.parent and not log_path.parent.exists():
            log_path.parent.mkdir(parents=True, exist_ok=True)

        fh = logging.FileHandler(log_path, mode="w" if truncate else "a", encoding="utf-8")
        fh.setFormatter(fmt)
        fh.setLevel(logging.DEBUG)
        root.addHandler(fh)

    # urllib3 logs every connection at DEBUG, which drowns out our own output
    logging.getLogger("urllib3").setLevel(logging.WARNING)
