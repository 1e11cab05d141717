"""Tests for active line resolution and display windows"""

from lrc_parser import LyricLine, parse_lrc
from sync_engine import LOOKAHEAD_SECONDS, active_index, format_time, window, window_start

def lines_at(*times):
    return [LyricLine(time=t, text=f"line {i}") for i, t in enumerate(times)]

class TestActiveIndex:
    """Test playback position resolution"""

    def test_before_first_cue(self):
        assert active_index(lines_at(1.0, 5.0), 0.5) is None

    def test_exact_cue(self):
        assert active_index(lines_at(0.0, 5.0, 10.0), 5.0) == 1

    def test_between_cues(self):
        assert active_index(lines_at(0.0, 5.0, 10.0), 7.0) == 1

    def test_after_last_cue(self):
        assert active_index(lines_at(0.0, 5.0, 10.0), 300.0) == 2

    def test_lookahead(self):
        """A line becomes active slightly before its timestamp"""
        assert LOOKAHEAD_SECONDS == 0.2
        assert active_index(lines_at(0.0, 5.0, 10.0), 4.9) == 1
        assert active_index(lines_at(0.0, 5.0, 10.0), 4.7) == 0

    def test_custom_lookahead(self):
        assert active_index(lines_at(0.0, 5.0), 4.9, lookahead=0.0) == 0

    def test_empty(self):
        assert active_index([], 0.0) is None
        assert active_index([], 123.0) is None

    def test_no_clock(self):
        assert active_index(lines_at(0.0), None) is None

    def test_monotonic(self):
        """Non-decreasing time never moves the active line backwards"""
        lines = lines_at(0.0, 5.0, 10.0)
        samples = [0.0, 0.1, 0.35, 2.0, 4.79, 4.8, 4.81, 5.0, 7.3, 9.8, 9.81, 10.0, 60.0]
        previous = -1
        for t in samples:
            idx = active_index(lines, t)
            current = -1 if idx is None else idx
            assert current >= previous
            previous = current

    def test_untimed_lines_are_never_active(self):
        lines = [
            LyricLine(time=None, text="credits"),
            LyricLine(time=1.0, text="a"),
            LyricLine(time=None, text="note"),
            LyricLine(time=3.0, text="b"),
        ]
        assert active_index(lines, 0.0) is None
        assert active_index(lines, 2.0) == 1
        assert active_index(lines, 3.0) == 3

    def test_repeated_chorus(self):
        lyrics = parse_lrc("[00:05.00][00:10.00]La la\n[00:07.00]verse")
        assert [lyrics.lines[active_index(lyrics.lines, t)].time for t in (5.0, 7.5, 11.0)] == [5.0, 7.0, 10.0]

    def test_equal_times_pick_last(self):
        lines = lines_at(1.0, 1.0, 2.0)
        assert active_index(lines, 1.0) == 1

class TestWindow:
    """Test the slice shown around the active line"""

    def test_middle(self):
        items = list(range(20))
        assert window(items, 10) == [8, 9, 10, 11, 12, 13, 14, 15, 16]
        assert window_start(10) == 8

    def test_near_edges(self):
        items = list(range(5))
        assert window(items, 0) == [0, 1, 2, 3, 4]
        assert window(items, 4, before=1, after=3) == [3, 4]
        assert window_start(1) == 0

    def test_no_active_line(self):
        items = list(range(20))
        assert window(items, None) == list(range(7))
        assert window_start(None) == 0

    def test_empty(self):
        assert window([], 3) == []

class TestFormatTime:
    """Test timestamp display"""

    def test_format(self):
        assert format_time(0.0) == "00:00"
        assert format_time(65.9) == "01:05"
        assert format_time(600.0) == "10:00"

    def test_untimed(self):
        assert format_time(None) == "--:--"
