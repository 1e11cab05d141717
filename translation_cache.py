import time
from typing import Any, Dict, Hashable, Optional

LYRICS_TTL_SECONDS = 60 * 60  # 1 hour
TRANSLATION_TTL_SECONDS = 60 * 60 * 24  # 24 hours

# key: ("lyrics", provider, track_id) or ("translation", provider, track_id, lang)
# value: {"created_at": int, "value": Any}
_CACHE: Dict[Hashable, dict] = {}

def get_cached(key: Hashable, max_age_seconds: int = LYRICS_TTL_SECONDS) -> Optional[Any]:
    item = _CACHE.get(key)
    if not item:
        return None
    if int(time.time()) - item["created_at"] > max_age_seconds:
        _CACHE.pop(key, None)
        return None
    return item["value"]

def set_cached(key: Hashable, value: Any) -> None:
    _CACHE[key] = {"created_at": int(time.time()), "value": value}

def clear() -> None:
    _CACHE.clear()
