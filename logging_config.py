from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from utils.paths import LOG_DIR

_LOG_CONFIGURED = False

FORMAT = (
    "%(asctime)s | %(levelname)s | %(name)s | pid=%(process)d tid=%(threadName)s | %(message)s"
)


def get_logger(
    name: str,
    level: str = "INFO",
    console: bool = True,
    log_dir: Optional[Path] = None,
) -> logging.Logger:
    """Return a logger configured for the application.

    The first call installs the handlers; later calls only look up ``name``.
    The terminal dashboard passes ``console=False`` so log lines do not land
    in the middle of its prompts.
    """
    global _LOG_CONFIGURED
    if not _LOG_CONFIGURED:
        target = log_dir or LOG_DIR
        log_level = getattr(logging, str(level).upper(), logging.INFO)
        target.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            target / "app.log", maxBytes=2 * 1024 * 1024, backupCount=5, encoding="utf-8"
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(FORMAT))

        root = logging.getLogger()
        root.setLevel(log_level)
        root.addHandler(file_handler)

        if console:
            stream_handler = logging.StreamHandler()
            stream_handler.setLevel(log_level)
            stream_handler.setFormatter(logging.Formatter(FORMAT))
            root.addHandler(stream_handler)

        root.info("Log file: %s", file_handler.baseFilename)
        _LOG_CONFIGURED = True
    return logging.getLogger(name)
