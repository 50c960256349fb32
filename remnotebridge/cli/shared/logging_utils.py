"""Loguru helpers for consistent file logging in CLI commands."""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

from remnotebridge.config.loader import get_log_dir

_SINK_IDS: dict[str, int] = {}


def ensure_rotating_log_file(name: str, level: str = "INFO", log_dir: Path | None = None) -> Path:
    """Ensure a rotating log sink for the given command name."""
    directory = log_dir or get_log_dir()
    log_path = directory / f"{name}.log"
    if name in _SINK_IDS:
        return log_path
    directory.mkdir(parents=True, exist_ok=True)
    sink_id = logger.add(
        str(log_path),
        level=level,
        rotation="10 MB",
        retention="14 days",
        enqueue=True,
        encoding="utf-8",
        backtrace=False,
        diagnose=False,
    )
    _SINK_IDS[name] = sink_id
    return log_path


def _stderr_sink(message: str) -> None:
    # Resolved per write so redirected streams are honoured.
    sys.stderr.write(message)


def configure_console_logging(verbose: bool) -> None:
    """Replace loguru's default stderr sink; quiet unless verbose."""
    logger.remove()
    logger.add(_stderr_sink, level="DEBUG" if verbose else "WARNING")
    _SINK_IDS.clear()
