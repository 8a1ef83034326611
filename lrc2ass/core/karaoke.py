"""Karaoke renderer — highlight durations, ``\\k`` markup, and line timing.

WHY: ASS karaoke tags carry durations, but LRC only carries start times.
Every duration therefore has to be derived from the NEXT start time, which
is only correct once fragments and lines are in chronological order. This
module is the one place that derivation happens.

HOW: render_markup() turns an ordered fragment list into ``{\\kN}text``
units, taking each fragment's duration from its successor and the last
fragment's from the line successor (or the configured fallback).
line_timing() decides each line's start, end, and the successor passed to
render_markup(). render_document() walks the sorted document and produces
RenderedLine objects, adding the optional next-line preview.

RULES:
- duration_i = start(i+1) - start(i), computed in integer centiseconds
- Every emitted ``\\k`` value is >= config.min_centiseconds (default 1)
- Character mode: each unit gets floor(N / k) cs; ASS escapes ``\\N``,
  ``\\n``, ``\\h`` are one unit and never split
- Text is inserted verbatim — ``{``, ``}`` and ``\\N`` are not escaped
- Blank lines render nothing but still end the previous line
- A line's end is its trailing end marker, else the next line's start
  (when extend_to_next_line), else a fallback pad
- The last line of the document ends document_fallback_s after its last
  timestamp
- The preview never changes primary timing
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple

from lrc2ass.core.ir import LyricDocument, LyricLine, RenderedLine, TimedFragment
from lrc2ass.core.timecode import centiseconds_to_seconds, to_centiseconds
from lrc2ass.presets import (
    GRANULARITY_AUTO,
    GRANULARITY_CHARACTER,
    KaraokeConfig,
)

logger = logging.getLogger(__name__)

# One logical character, or a two-character ASS escape kept whole.
_CHARACTER_RE = re.compile(r"\\[Nnh]|.", re.DOTALL)


def karaoke_tag(centiseconds: int, text: str) -> str:
    """Return one ``{\\kN}text`` unit."""
    return "{{\\k{}}}{}".format(centiseconds, text)


def clamp_centiseconds(centiseconds: int, minimum: int = 1) -> int:
    """Raise zero or negative durations to the minimum."""
    return centiseconds if centiseconds >= minimum else minimum


def split_characters(text: str) -> List[str]:
    """Split text into highlightable characters.

    Python strings index by code point, so non-Latin lyrics are never cut
    mid-character. ``\\N`` line breaks stay intact.
    """
    return _CHARACTER_RE.findall(text)


def distribute_characters(text: str, centiseconds: int, minimum: int = 1) -> str:
    """Spread a duration evenly across every character of text.

    Example:
        >>> distribute_characters("abc", 100)
        '{\\\\k33}a{\\\\k33}b{\\\\k33}c'
    """
    chars = split_characters(text)
    if not chars:
        return ""
    per_char = clamp_centiseconds(centiseconds // len(chars), minimum)
    return "".join(karaoke_tag(per_char, ch) for ch in chars)


def fragment_durations(
    fragments: List[TimedFragment],
    successor_start: Optional[float],
    fallback_s: float,
    minimum: int = 1,
) -> List[int]:
    """Derive each fragment's highlight duration in centiseconds.

    Args:
        fragments: Fragments sorted by start time.
        successor_start: Start of whatever follows the last fragment, or
            None to use the fallback.
        fallback_s: Duration of the last fragment when there is no
            successor.
        minimum: Floor for every duration.

    Returns:
        One clamped centisecond count per fragment.
    """
    durations: List[int] = []
    for i, frag in enumerate(fragments):
        start = to_centiseconds(frag.start_s)
        if i + 1 < len(fragments):
            centis = to_centiseconds(fragments[i + 1].start_s) - start
        elif successor_start is not None:
            centis = to_centiseconds(successor_start) - start
        else:
            centis = to_centiseconds(fallback_s)
        durations.append(clamp_centiseconds(centis, minimum))
    return durations


def uses_character_mode(granularity: str, fragment_count: int) -> bool:
    if granularity == GRANULARITY_AUTO:
        return fragment_count == 1
    return granularity == GRANULARITY_CHARACTER


def render_markup(
    fragments: List[TimedFragment],
    successor_start: Optional[float] = None,
    config: Optional[KaraokeConfig] = None,
) -> str:
    """Render ordered fragments as concatenated ``{\\kN}text`` units.

    WHY: This is the heart of the karaoke output. ASS accumulates ``\\k``
    durations from the event start, so each unit's N must cover exactly
    the gap to the next timestamp.

    HOW: Empty boundary fragments are dropped first; since durations come
    from consecutive visible starts, a dropped gap is absorbed by the
    preceding fragment. Durations are then emitted per fragment (syllable
    mode) or per character (character mode).

    Args:
        fragments: Fragments of one line, sorted by start time.
        successor_start: Start time following the last fragment, or None
            to use ``config.syllable_fallback_s``.
        config: Timing policy; defaults to KaraokeConfig().

    Returns:
        The markup string; empty if no fragment carries text.
    """
    if config is None:
        config = KaraokeConfig()
    timed = [f for f in fragments if f.text]
    if not timed:
        return ""

    durations = fragment_durations(
        timed, successor_start, config.syllable_fallback_s, config.min_centiseconds
    )
    character_mode = uses_character_mode(config.granularity, len(timed))

    parts: List[str] = []
    for frag, centis in zip(timed, durations):
        if character_mode:
            parts.append(distribute_characters(frag.text, centis, config.min_centiseconds))
        else:
            parts.append(karaoke_tag(centis, frag.text))
    return "".join(parts)


def line_timing(
    line: LyricLine,
    next_start: Optional[float],
    config: KaraokeConfig,
) -> Tuple[float, float, Optional[float]]:
    """Derive a line's start, end, and the successor for its last fragment.

    Args:
        line: A non-blank line.
        next_start: Start of the next line in document order (blank lines
            included), or None for the last line.
        config: Timing policy.

    Returns:
        (start_s, end_s, successor_s). successor_s is None when the last
        syllable should use the syllable fallback instead.
    """
    timed = line.timed_fragments
    start_s = timed[0].start_s
    last_start = timed[-1].start_s
    marker = line.end_marker_s

    successor: Optional[float]
    if marker is not None:
        end_s = marker
        successor = marker
    elif next_start is not None and config.extend_to_next_line:
        end_s = next_start
        successor = next_start
    elif next_start is not None:
        end_s = last_start + config.syllable_fallback_s
        successor = None
    else:
        end_s = last_start + config.document_fallback_s
        successor = None

    # Whole-line timing: the single unit lights up for the whole line.
    if successor is None and len(timed) == 1:
        successor = end_s

    if to_centiseconds(end_s) <= to_centiseconds(start_s):
        logger.debug("Line at %.2fs ends before it starts; padding by 1 cs", start_s)
        end_s = centiseconds_to_seconds(to_centiseconds(start_s) + 1)

    return start_s, end_s, successor


def render_document(
    document: LyricDocument,
    config: Optional[KaraokeConfig] = None,
) -> List[RenderedLine]:
    """Run the timing pass over a sorted document.

    Args:
        document: Parsed document with lines sorted by start time.
        config: Timing policy; defaults to KaraokeConfig().

    Returns:
        One RenderedLine per non-blank line, in chronological order.
    """
    if config is None:
        config = KaraokeConfig()
    lines = document.lines
    rendered: List[RenderedLine] = []

    for i, line in enumerate(lines):
        if line.is_blank:
            continue
        next_start = lines[i + 1].start_s if i + 1 < len(lines) else None
        start_s, end_s, successor = line_timing(line, next_start, config)
        rendered.append(RenderedLine(
            start_s=start_s,
            end_s=end_s,
            markup=render_markup(line.fragments, successor, config),
            text=line.text,
        ))

    if config.next_line_preview:
        for current, following in zip(rendered, rendered[1:]):
            current.preview_text = following.text or None

    return rendered
