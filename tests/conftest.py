"""Test configuration and fixtures"""

import pytest

import translation_cache

@pytest.fixture(autouse=True)
def clear_cache():
    """Each test starts with an empty lyric/translation cache"""
    translation_cache.clear()
    yield
    translation_cache.clear()

@pytest.fixture
def sample_lrc():
    """Primary track with metadata, a caption and a repeated chorus line"""
    return "\n".join([
        "[ti:Test Song]",
        "[ar:Test Artist]",
        "作词 : Someone",
        "[00:01.00]First line",
        "[00:05.50]Second line",
        "[00:10.00][00:20.00]Chorus",
        "[00:15.25]Bridge",
    ])

@pytest.fixture
def sample_tlyric():
    """Translation track, slightly off the primary timestamps"""
    return "\n".join([
        "[by:translator]",
        "[00:01.20]第一行",
        "[00:05.40]第二行",
        "[00:10.00]副歌",
        "[00:15.90]桥段",
    ])
