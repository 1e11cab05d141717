import logging
from typing import Literal, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

import settings
import translation_cache
from lrc_parser import Lyrics, parse_lrc
from lyric_sources import (
    PROVIDERS,
    LyricFetchError,
    UnknownProviderError,
    fetch_lyrics,
    parse_id_from_url,
)
from settings import SettingsStore
from sync_engine import active_index, window, window_start

logging.basicConfig(
    level=settings.log_level(),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI()

WINDOW_BEFORE = 2
WINDOW_AFTER = 6

# =========================
# REQUEST BODIES
# =========================
class LyricsRequest(BaseModel):
    provider: str
    source: Literal["url", "id"]
    value: str = Field(min_length=1)
    cookie: Optional[str] = None
    lang: Optional[str] = None

class PositionRequest(BaseModel):
    provider: str
    id: str = Field(min_length=1)
    currentTime: Optional[float] = None
    cookie: Optional[str] = None

class SettingsUpdate(BaseModel):
    show_translation: Optional[bool] = None
    show_timestamp: Optional[bool] = None
    follow: Optional[bool] = None

@app.exception_handler(RequestValidationError)
async def invalid_body(request: Request, exc: RequestValidationError):
    return JSONResponse(
        {"error": "invalid_body", "details": jsonable_errors(exc)},
        status_code=400,
    )

def jsonable_errors(exc: RequestValidationError) -> list:
    return [{"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in exc.errors()]

# =========================
# HELPERS
# =========================
def load_lyrics(provider: str, track_id: str, cookie: Optional[str] = None) -> Lyrics:
    """Fetch and parse lyrics for a track, cached per (provider, id)."""
    key = ("lyrics", provider, track_id)
    cached = translation_cache.get_cached(key, translation_cache.LYRICS_TTL_SECONDS)
    if cached is not None:
        return cached

    text = fetch_lyrics(provider, track_id, cookie)
    lyrics = parse_lrc(text.lrc, text.tlyric, tolerance=settings.align_tolerance())
    translation_cache.set_cached(key, lyrics)
    return lyrics

def machine_translate(provider: str, track_id: str, lyrics: Lyrics, lang: str) -> Lyrics:
    """Fill missing translations with a machine translation; never fails the request."""
    key = ("translation", provider, track_id, lang)
    translated_list = translation_cache.get_cached(key, translation_cache.TRANSLATION_TTL_SECONDS)

    # Guard: if lengths don't match (provider changed, parser changed, etc.), retranslate
    if translated_list is None or len(translated_list) != len(lyrics.lines):
        from translator import translate_lines
        try:
            translated_list = translate_lines([ln.text for ln in lyrics.lines], target_lang=lang)
        except Exception:
            logger.exception("Machine translation failed for %s/%s", provider, track_id)
            return lyrics
        translation_cache.set_cached(key, translated_list)

    from translator import attach_translations
    return attach_translations(lyrics, translated_list)

def unknown_provider(provider: str) -> JSONResponse:
    return JSONResponse(
        {"error": "unknown_provider", "provider": provider, "supported": list(PROVIDERS)},
        status_code=400,
    )

def fetch_failed(e: LyricFetchError) -> JSONResponse:
    logger.error("Lyric fetch failed: %s", e)
    return JSONResponse(
        {"error": "lyrics_fetch_failed", "provider": e.provider, "message": str(e)},
        status_code=502,
    )

# =========================
# BASIC ENDPOINTS
# =========================
@app.get("/health")
def health():
    return {"ok": True}

# =========================
# LYRICS
# =========================
@app.post("/api/lyrics")
def lyrics(body: LyricsRequest):
    if body.provider not in PROVIDERS:
        return unknown_provider(body.provider)

    track_id = body.value if body.source == "id" else parse_id_from_url(body.provider, body.value)
    if not track_id:
        return JSONResponse({"error": "invalid_id_or_url"}, status_code=400)

    try:
        parsed = load_lyrics(body.provider, track_id, body.cookie)
    except UnknownProviderError:
        return unknown_provider(body.provider)
    except LyricFetchError as e:
        return fetch_failed(e)

    has_translation = any(ln.translation for ln in parsed.lines)
    if body.lang and parsed.lines and not has_translation:
        parsed = machine_translate(body.provider, track_id, parsed, body.lang)

    return {
        "provider": body.provider,
        "id": track_id,
        "isSynced": not parsed.is_empty,
        "lines": [ln.to_dict() for ln in parsed.lines],
        "captions": list(parsed.captions),
    }

@app.post("/api/lyrics/position")
def lyrics_position(body: PositionRequest):
    if body.provider not in PROVIDERS:
        return unknown_provider(body.provider)

    try:
        parsed = load_lyrics(body.provider, body.id, body.cookie)
    except LyricFetchError as e:
        return fetch_failed(e)

    idx = active_index(parsed.lines, body.currentTime, lookahead=settings.lookahead_seconds())
    w = window(parsed.lines, idx, before=WINDOW_BEFORE, after=WINDOW_AFTER)

    return {
        "isSynced": not parsed.is_empty,
        "currentTime": body.currentTime,
        "activeIndex": -1 if idx is None else idx,
        "activeLine": None if idx is None else parsed.lines[idx].to_dict(),
        "windowStartIndex": window_start(idx, before=WINDOW_BEFORE),
        "window": [ln.to_dict() for ln in w],
    }

# =========================
# DISPLAY SETTINGS
# =========================
@app.get("/api/settings")
def get_settings(request: Request):
    return SettingsStore.from_cookies(request.cookies).as_dict()

@app.post("/api/settings")
def update_settings(body: SettingsUpdate, request: Request):
    store = SettingsStore.from_cookies(request.cookies)
    for key, value in body.model_dump(exclude_none=True).items():
        store.set(key, value)

    resp = JSONResponse(store.as_dict())
    for key, value in store.to_cookies().items():
        resp.set_cookie(
            key=key,
            value=value,
            httponly=True,
            secure=settings.is_prod(),
            samesite="lax",
            path="/",
            max_age=365 * 24 * 60 * 60,
        )
    return resp
