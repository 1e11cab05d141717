import logging
from enum import Enum
from typing import Callable, Optional

from lrc_parser import LyricLine

logger = logging.getLogger(__name__)

class FollowState(str, Enum):
    AUTO = "auto"
    MANUAL = "manual"

class ScrollFollow:
    """
    Decides when the lyric view follows the active line.

    The view starts in AUTO. Any scroll or touch from the user switches to
    MANUAL, and only resume() switches back. Centering itself is left to the
    `scroll_to(index)` callback; `seek(seconds)` forwards click-to-seek to the
    player.
    """

    def __init__(self, scroll_to: Callable[[int], None],
                 seek: Optional[Callable[[float], None]] = None) -> None:
        self._scroll_to = scroll_to
        self._seek = seek
        self.state = FollowState.AUTO
        self.active: Optional[int] = None

    @property
    def following(self) -> bool:
        return self.state is FollowState.AUTO

    def user_scrolled(self) -> None:
        if self.state is not FollowState.MANUAL:
            logger.debug("Follow paused by user scroll")
        self.state = FollowState.MANUAL

    def resume(self) -> None:
        if self.state is not FollowState.AUTO:
            logger.debug("Follow resumed at line %s", self.active)
        self.state = FollowState.AUTO
        if self.active is not None:
            self._scroll_to(self.active)

    def update(self, active: Optional[int]) -> bool:
        """Record the new active index; returns True if the view was scrolled."""
        changed = active != self.active
        self.active = active
        if changed and active is not None and self.following:
            self._scroll_to(active)
            return True
        return False

    def seek_to(self, line: LyricLine) -> bool:
        if line.time is None or self._seek is None:
            return False
        self._seek(line.time)
        return True
