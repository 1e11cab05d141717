import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

ALIGN_TOLERANCE_SECONDS = 1.0

@dataclass(frozen = True)
class LyricLine:
    time: Optional[float]
    text: str
    translation: Optional[str] = None

    def to_dict(self) -> dict:
        return {"time": self.time, "text": self.text, "translation": self.translation}

@dataclass(frozen = True)
class Lyrics:
    lines: Tuple[LyricLine, ...] = ()
    # Untimed lines (credits, comments), kept apart from the timed cues
    captions: Tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.lines

# LRC timestamps like [01:23.45], [1:23.4], [01:23:450] or [01:23]
_TS = re.compile(r"\[(\d{1,2}):(\d{1,2})(?:[:.](\d{1,3}))?\]")

def _frac_to_ms(frac: Optional[str]) -> int:
    if not frac:
        return 0
    # Fractional seconds: .4 -> 400ms, .45 -> 450ms, .456 -> 456ms
    return int(frac.ljust(3, "0"))

def tokenize(raw: str) -> Tuple[Iterator[Tuple[int, int, int]], str]:
    """
    Returns (tags, text) for one physical line.

    tags lazily yields (minutes, seconds, milliseconds) for every timestamp in
    the line; text is the line with all timestamps removed and trimmed.
    """
    tags = (
        (int(m.group(1)), int(m.group(2)), _frac_to_ms(m.group(3)))
        for m in _TS.finditer(raw)
    )
    return tags, _TS.sub("", raw).strip()

def tag_seconds(tag: Tuple[int, int, int]) -> float:
    mm, ss, ms = tag
    return mm * 60 + ss + ms / 1000

def build_translation_index(tlyric: Optional[str]) -> Dict[float, str]:
    index: Dict[float, str] = {}
    if not tlyric:
        return index

    for raw in tlyric.splitlines():
        tags, text = tokenize(raw)
        if not text:
            continue
        for tag in tags:
            # Later lines win on an identical timestamp
            index[tag_seconds(tag)] = text
    return index

def align(t: float, index: Dict[float, str], tolerance: float = ALIGN_TOLERANCE_SECONDS) -> Optional[str]:
    """
    Returns the translation nearest to t, or None if the closest one is
    tolerance seconds or more away. Equidistant candidates resolve to the
    earlier timestamp.
    """
    if t in index:
        return index[t]
    if not index:
        return None

    closest = min(index, key=lambda k: (abs(k - t), k))
    if abs(closest - t) < tolerance:
        return index[closest]
    return None

def parse_lrc(lrc_text: Optional[str], tlyric: Optional[str] = None,
              tolerance: float = ALIGN_TOLERANCE_SECONDS) -> Lyrics:
    t_index = build_translation_index(tlyric)

    lines: List[LyricLine] = []
    captions: List[str] = []

    for raw in (lrc_text or "").splitlines():
        tags, text = tokenize(raw)

        emitted = False
        for tag in tags:
            t = tag_seconds(tag)
            lines.append(LyricLine(time=t, text=text, translation=align(t, t_index, tolerance)))
            emitted = True

        if not emitted and text:
            captions.append(text)

    # Stable sort, so repeated times keep input order
    lines.sort(key=lambda x: x.time)

    logger.debug(
        "Parsed %d timed lines (%d captions, %d translation entries)",
        len(lines), len(captions), len(t_index),
    )
    return Lyrics(lines=tuple(lines), captions=tuple(captions))
