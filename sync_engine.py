from bisect import bisect_right
from typing import List, Optional, Sequence, TypeVar

from lrc_parser import LyricLine

T = TypeVar("T")

# Highlight leads the audio slightly to cover UI/audio latency
LOOKAHEAD_SECONDS = 0.2

def active_index(lines: Sequence[LyricLine], current_time: Optional[float],
                 lookahead: float = LOOKAHEAD_SECONDS) -> Optional[int]:
    """
    Returns the position in `lines` of the last timed line with
    time <= current_time + lookahead.
    Returns None before the first cue, for no lines, or with no clock.
    Untimed lines are never active.
    """
    if current_time is None or not lines:
        return None

    positions = [i for i, ln in enumerate(lines) if ln.time is not None]
    times = [lines[i].time for i in positions]

    # bisect_right gives insertion point to keep list sorted,
    # so subtract 1 to get the last timestamp <= current time
    i = bisect_right(times, current_time + lookahead) - 1
    if i < 0:
        return None
    return positions[i]

def window(lines: Sequence[T], idx: Optional[int], before: int = 2, after: int = 6) -> List[T]:
    """
    Returns a slice around idx for UI: [idx-before, idx+after].
    With no active line, returns the first lines.
    """
    if not lines:
        return []
    if idx is None:
        idx = 0
    start = max(0, idx - before)
    end = min(len(lines), idx + after + 1)
    return list(lines[start:end])

def window_start(idx: Optional[int], before: int = 2) -> int:
    # global index of window(...)[0]
    return max(0, idx - before) if idx is not None else 0

def format_time(t: Optional[float]) -> str:
    if t is None:
        return "--:--"
    m = int(t // 60)
    s = int(t % 60)
    return f"{m:02d}:{s:02d}"
