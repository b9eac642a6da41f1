"""Settings management for PushGate.

Settings are stored as JSON in ``~/.pushgate/config.json``.
Passwords are never written here — they are delegated to ``keyring``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_CONFIG: dict[str, Any] = {
    "default_remote": "origin",
    "keyring_service": "PushGate",
    "remember_credentials": False,
    "notification_poll_ms": 50,
    "key_exit_popup": "Escape",
    "key_enter": "Return",
    "key_backspace": "BackSpace",
    "log_level": "INFO",
}

# ---------------------------------------------------------------------------
# ConfigManager
# ---------------------------------------------------------------------------


class ConfigManager:
    """Loads and persists application settings.

    Writes are atomic (write-to-temp, then rename).  A corrupt file logs a
    warning and is reset to defaults; it never crashes the application.
    """

    def __init__(self, base_dir: Path | None = None) -> None:
        """Initialise, creating ``~/.pushgate/`` if necessary."""
        self._base = base_dir or Path.home() / ".pushgate"
        self._config_path = self._base / "config.json"

        self._base.mkdir(parents=True, exist_ok=True)
        self._config: dict[str, Any] = self._load_config()

    def _atomic_write(self, path: Path, data: Any) -> None:
        """Serialise *data* as JSON and write atomically to *path*."""
        tmp = path.with_suffix(".tmp")
        try:
            tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
            tmp.replace(path)
        except OSError as exc:
            logger.error("Failed to write %s: %s", path, exc)
            raise

    def _load_config(self) -> dict[str, Any]:
        """Load ``config.json``, resetting to defaults on corruption."""
        if not self._config_path.exists():
            logger.debug("No config file — creating defaults")
            config = dict(DEFAULT_CONFIG)
            self._atomic_write(self._config_path, config)
            return config

        try:
            loaded = json.loads(self._config_path.read_text(encoding="utf-8"))
            if not isinstance(loaded, dict):
                raise ValueError("Config root must be a JSON object")
            # Keys added in later versions must always be present
            merged = dict(DEFAULT_CONFIG)
            merged.update(loaded)
            return merged
        except (json.JSONDecodeError, ValueError, OSError) as exc:
            logger.warning("Corrupt config.json (%s) — resetting to defaults", exc)
            config = dict(DEFAULT_CONFIG)
            self._atomic_write(self._config_path, config)
            return config

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value for *key*, or *default* if missing."""
        return self._config.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set *key* to *value* and persist the config file."""
        self._config[key] = value
        self._atomic_write(self._config_path, self._config)
        logger.debug("Config updated: %s = %r", key, value)
