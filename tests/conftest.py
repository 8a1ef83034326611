"""Shared test fixtures for the lrc2ass test suite.

WHY: Most test modules need the same small lyric file: two timed lines,
one of them split into syllables, plus ID tags. Centralizing it keeps
every module checking against the same worked example.

HOW: Pytest fixtures provide the raw LRC lines, the parsed LyricDocument,
and the default "karaoke" config. An autouse fixture clears LRC2ASS_*
environment variables so a developer's .env never leaks into tests.

RULES:
- SAMPLE_LRC matches the worked example: "Hello"/"World" then "Bye"
- Expected line 1 markup is {\\k150}Hello{\\k250}World, 0:00:01.00 → 0:00:05.00
"""

from typing import List

import pytest

from lrc2ass.core.parser import parse_document
from lrc2ass.presets import resolve_config


SAMPLE_LRC: List[str] = [
    "[ti:Sample Song]",
    "[ar:Test Artist]",
    "",
    "[00:01.00]Hello[00:02.50]World",
    "not a lyric line",
    "[00:05.00]Bye",
]

_ENV_VARS = (
    "LRC2ASS_SYLLABLE_FALLBACK_S",
    "LRC2ASS_DOCUMENT_FALLBACK_S",
    "LRC2ASS_NEXT_LINE_PREVIEW",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sample_lrc_lines():
    """The worked-example LRC file as a list of lines."""
    return list(SAMPLE_LRC)


@pytest.fixture
def sample_lrc_text():
    return "\n".join(SAMPLE_LRC) + "\n"


@pytest.fixture
def sample_document():
    """SAMPLE_LRC parsed into a LyricDocument."""
    return parse_document(SAMPLE_LRC)


@pytest.fixture
def karaoke_config():
    """A fresh copy of the default "karaoke" preset."""
    return resolve_config("karaoke")


@pytest.fixture
def syllable_config():
    return resolve_config("syllable")
