"""Process-wide settings for the default config file."""

from __future__ import annotations

import threading
from pathlib import Path

from remnotebridge.config.loader import load_config
from remnotebridge.config.schema import Config

_lock = threading.RLock()
_default: Config | None = None


def get_config(config_path: Path | None = None, *, force_reload: bool = False) -> Config:
    """Return settings for ``config_path``.

    An explicit path (``--config``) is read fresh on every call. Only the
    default ``~/.remnote-bridge/config.json`` is kept for the process.
    """
    global _default
    if config_path is not None:
        return load_config(Path(config_path).expanduser())
    with _lock:
        if force_reload or _default is None:
            _default = load_config()
        return _default


def clear_config_cache() -> None:
    """Forget the cached default settings."""
    global _default
    with _lock:
        _default = None
