import logging
import os
import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import parse_qs, urlparse

import requests

logger = logging.getLogger(__name__)

PROVIDERS = ("netease", "lrclib")

NETEASE_LYRIC_URL = "https://music.163.com/api/song/lyric"
LRCLIB_GET_URL = "https://lrclib.net/api/get/{track_id}"
REQUEST_TIMEOUT = 15

class LyricFetchError(Exception):
    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider

class UnknownProviderError(ValueError):
    pass

@dataclass(frozen = True)
class LyricText:
    provider: str
    track_id: str
    lrc: str = ""
    tlyric: str = ""

def get_provider_cookie(provider: str, user_cookie: Optional[str] = None) -> Optional[str]:
    """
    Cookie sent to the provider.
    Priority: user cookie > METING_COOKIE_<PROVIDER> > METING_COOKIE.
    """
    if user_cookie:
        return user_cookie
    provider_cookie = os.environ.get(f"METING_COOKIE_{provider.upper()}")
    if provider_cookie:
        return provider_cookie
    return os.environ.get("METING_COOKIE") or None

def parse_id_from_url(provider: str, url: str) -> Optional[str]:
    try:
        u = urlparse(url)
    except ValueError:
        return None
    if not u.scheme or not u.netloc:
        return None

    if provider == "netease":
        ids = parse_qs(u.query).get("id")
        if ids and ids[0]:
            return ids[0]
        # https://music.163.com/#/song?id=123
        m = re.search(r"id=(\d+)", u.fragment)
        return m.group(1) if m else None

    if provider == "lrclib":
        m = re.search(r"/api/get/(\d+)", u.path)
        return m.group(1) if m else None

    return None

def _get_json(provider: str, url: str, **kwargs) -> dict:
    try:
        r = requests.get(url, timeout=REQUEST_TIMEOUT, **kwargs)
    except requests.RequestException as e:
        raise LyricFetchError(provider, f"request failed: {e}") from e

    if r.status_code == 404:
        # No lyrics for this track
        return {}
    if not r.ok:
        raise LyricFetchError(provider, f"HTTP {r.status_code}")

    try:
        data = r.json()
    except ValueError as e:
        logger.error("%s returned non-JSON body: %s", provider, r.text[:500])
        raise LyricFetchError(provider, "invalid JSON") from e
    if not isinstance(data, dict):
        raise LyricFetchError(provider, "unexpected payload")
    return data

def _fetch_netease(track_id: str, cookie: Optional[str]) -> LyricText:
    headers = {"Referer": "https://music.163.com/"}
    if cookie:
        headers["Cookie"] = cookie
    data = _get_json(
        "netease",
        NETEASE_LYRIC_URL,
        params={"id": track_id, "lv": -1, "tv": -1},
        headers=headers,
    )
    lrc = (data.get("lrc") or {}).get("lyric") or ""
    tlyric = (data.get("tlyric") or {}).get("lyric") or ""
    return LyricText(provider="netease", track_id=track_id, lrc=lrc, tlyric=tlyric)

def _fetch_lrclib(track_id: str, cookie: Optional[str]) -> LyricText:
    data = _get_json("lrclib", LRCLIB_GET_URL.format(track_id=track_id))
    lrc = data.get("syncedLyrics") or ""
    return LyricText(provider="lrclib", track_id=track_id, lrc=lrc)

_FETCHERS = {
    "netease": _fetch_netease,
    "lrclib": _fetch_lrclib,
}

def fetch_lyrics(provider: str, track_id: str, cookie: Optional[str] = None) -> LyricText:
    fetcher = _FETCHERS.get(provider)
    if fetcher is None:
        raise UnknownProviderError(provider)

    logger.info("Fetching lyrics provider=%s id=%s", provider, track_id)
    text = fetcher(track_id, get_provider_cookie(provider, cookie))
    if not text.lrc:
        logger.info("No synced lyrics for provider=%s id=%s", provider, track_id)
    return text
