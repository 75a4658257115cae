from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler


LOG_FORMAT = "%(asctime)s [%(levelname)s]: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_LOG_BYTES = 5 * 1024 * 1024
LOG_BACKUPS = 5

_LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def configure_logging(level: str = "info", *, log_dir: str | None = None) -> logging.Logger:
    """
    Console logging for the capitol_fetcher logger tree.

    With `log_dir`, also write rotating combined.log and error.log files.
    """
    lvl = _LEVELS.get(str(level).strip().lower())
    if lvl is None:
        raise ValueError(f"unknown log level: {level!r}")

    root = logging.getLogger("capitol_fetcher")
    root.setLevel(lvl)
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    fmt = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    console = logging.StreamHandler()
    console.setFormatter(fmt)
    root.addHandler(console)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        for name, file_level in (("combined.log", lvl), ("error.log", logging.ERROR)):
            fh = RotatingFileHandler(
                os.path.join(log_dir, name),
                maxBytes=MAX_LOG_BYTES,
                backupCount=LOG_BACKUPS,
                encoding="utf-8",
            )
            fh.setLevel(file_level)
            fh.setFormatter(fmt)
            root.addHandler(fh)

    return root
