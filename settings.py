import logging
import os
from typing import Dict, Mapping, Optional

from dotenv import load_dotenv

# Load environment variables early
load_dotenv()

logger = logging.getLogger(__name__)

def get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.environ.get(name)
    return value if value else default

def _float_env(name: str, default: float) -> float:
    raw = get_env(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default

def lookahead_seconds() -> float:
    return _float_env("LYRICS_LOOKAHEAD", 0.2)

def align_tolerance() -> float:
    return _float_env("LYRICS_ALIGN_TOLERANCE", 1.0)

def log_level() -> str:
    return (get_env("LOG_LEVEL", "INFO") or "INFO").upper()

def is_prod() -> bool:
    return os.environ.get("APP_ENV", "").lower() in ("prod", "production")

# =========================
# USER DISPLAY SETTINGS
# =========================
SETTING_DEFAULTS: Dict[str, bool] = {
    "show_translation": True,
    "show_timestamp": False,
    "follow": True,
}

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")

class SettingsStore:
    """Key-value display preferences, persisted as cookies by the web layer."""

    COOKIE_PREFIX = "pref_"

    def __init__(self, values: Optional[Mapping[str, bool]] = None) -> None:
        self._values: Dict[str, bool] = dict(SETTING_DEFAULTS)
        if values:
            for k, v in values.items():
                self.set(k, v)

    @classmethod
    def from_cookies(cls, cookies: Mapping[str, str]) -> "SettingsStore":
        store = cls()
        for key in SETTING_DEFAULTS:
            raw = cookies.get(cls.COOKIE_PREFIX + key)
            if raw is None:
                continue
            raw = raw.strip().lower()
            if raw in _TRUE:
                store.set(key, True)
            elif raw in _FALSE:
                store.set(key, False)
        return store

    def get_bool(self, key: str) -> bool:
        return self._values[key]

    def set(self, key: str, value: bool) -> None:
        if key not in SETTING_DEFAULTS:
            raise KeyError(key)
        self._values[key] = bool(value)

    def as_dict(self) -> Dict[str, bool]:
        return dict(self._values)

    def to_cookies(self) -> Dict[str, str]:
        return {self.COOKIE_PREFIX + k: ("1" if v else "0") for k, v in self._values.items()}
