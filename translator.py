import dataclasses
import logging
import os
from typing import Sequence

from google.cloud import translate_v2 as translate

from lrc_parser import LyricLine, Lyrics

logger = logging.getLogger(__name__)

_client = None

def get_client():
    global _client
    if _client is None:
        # Optionally enforce creds path if set
        creds = os.environ.get("GOOGLE_APPLICATION_CREDENTIALS")
        if creds and not os.path.isabs(creds):
            # Make relative path resolve from current working directory
            os.environ["GOOGLE_APPLICATION_CREDENTIALS"] = os.path.abspath(creds)

        _client = translate.Client()
    return _client

def translate_lines(lines: Sequence[str], target_lang: str) -> list[str]:
    if not lines:
        return []

    client = get_client()
    logger.info("Translating %d lines to %s", len(lines), target_lang)
    result = client.translate(list(lines), target_language=target_lang, format_="text")
    return [r["translatedText"] for r in result]

def attach_translations(lyrics: Lyrics, translations: Sequence[str]) -> Lyrics:
    """
    Returns a new Lyrics with translations[i] attached to lines[i].
    Lines that already carry a translation keep it.
    """
    if len(translations) != len(lyrics.lines):
        raise ValueError(
            f"got {len(translations)} translations for {len(lyrics.lines)} lines"
        )

    lines: list[LyricLine] = []
    for ln, tr in zip(lyrics.lines, translations):
        if ln.translation is None and tr and ln.text:
            ln = dataclasses.replace(ln, translation=tr)
        lines.append(ln)
    return Lyrics(lines=tuple(lines), captions=lyrics.captions)
