import logging
from pathlib import Path

import yaml

from .core.errors import ValidationError

logger = logging.getLogger(__name__)

HABITUAL_DIR = Path.home() / ".habitual"
DB_PATH = HABITUAL_DIR / "habitual.db"
CONFIG_PATH = HABITUAL_DIR / "config.yaml"

DEFAULTS: dict[str, object] = {
    "notifications": True,
    "theme": "dark",
    "window_days": 30,
    "log_level": "WARNING",
}

THEMES = ("dark", "light")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class Config:
    """Single-instance config manager. Load once, cache in memory."""

    _instance: "Config | None" = None
    _data: dict[str, object]

    def __new__(cls) -> "Config":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._data = {}
            cls._instance._load()
        return cls._instance

    def _load(self) -> None:
        """Load config from disk."""
        if not CONFIG_PATH.exists():
            self._data = {}
            return
        try:
            with CONFIG_PATH.open() as f:
                loaded = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("unreadable config %s, using defaults: %s", CONFIG_PATH, e)
            loaded = {}
        if not isinstance(loaded, dict):
            logger.warning("config %s is not a mapping, using defaults", CONFIG_PATH)
            loaded = {}
        self._data = loaded

    def _save(self) -> None:
        """Persist config to disk."""
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        with CONFIG_PATH.open("w") as f:
            yaml.dump(self._data, f, default_flow_style=False, allow_unicode=True)

    def reload(self) -> None:
        self._load()

    def get(self, key: str, default: object = None) -> object:
        """Get config value."""
        return self._data.get(key, default)

    def set(self, key: str, value: object) -> None:
        """Set config value and persist."""
        self._data[key] = value
        self._save()


_config = Config()


def reload() -> None:
    _config.reload()


def _coerce(key: str, raw: object) -> object:
    if key == "notifications":
        if isinstance(raw, bool):
            return raw
        text = str(raw).strip().lower()
        if text in ("true", "on", "yes", "1"):
            return True
        if text in ("false", "off", "no", "0"):
            return False
        raise ValidationError(f"notifications must be on/off, got '{raw}'")
    if key == "theme":
        text = str(raw).strip().lower()
        if text not in THEMES:
            raise ValidationError(f"theme must be one of {', '.join(THEMES)}, got '{raw}'")
        return text
    if key == "window_days":
        try:
            days = int(str(raw))
        except ValueError:
            raise ValidationError(f"window_days must be a whole number, got '{raw}'") from None
        if days < 1:
            raise ValidationError("window_days must be at least 1")
        return days
    if key == "log_level":
        text = str(raw).strip().upper()
        if text not in LOG_LEVELS:
            raise ValidationError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got '{raw}'")
        return text
    raise ValidationError(f"unknown setting '{key}' (known: {', '.join(DEFAULTS)})")


def get_setting(key: str) -> object:
    if key not in DEFAULTS:
        raise ValidationError(f"unknown setting '{key}' (known: {', '.join(DEFAULTS)})")
    value = _config.get(key, DEFAULTS[key])
    try:
        return _coerce(key, value)
    except ValidationError:
        logger.warning("invalid %s=%r in config, using default", key, value)
        return DEFAULTS[key]


def set_setting(key: str, value: object) -> object:
    coerced = _coerce(key, value)
    _config.set(key, coerced)
    return coerced


def get_settings() -> dict[str, object]:
    return {key: get_setting(key) for key in DEFAULTS}


def notifications_enabled() -> bool:
    return bool(get_setting("notifications"))


def get_theme() -> str:
    return str(get_setting("theme"))


def get_window_days() -> int:
    return int(str(get_setting("window_days")))


def get_log_level() -> str:
    return str(get_setting("log_level"))
