"""LRC line parser — bracket and angle timestamp notations.

WHY: Lyric files come in two flavours. Classic LRC tags each line (or each
syllable) with ``[mm:ss.cc]``; enhanced LRC adds word timing with
``<mm:ss.cc>`` tags, usually after a line-level bracket tag. The renderer
only wants ordered TimedFragments, so this module hides the notation.

HOW: parse_line() sniffs the line for an angle tag. If one is present the
angle parser runs, otherwise the bracket parser. Both split the line on
the shared timestamp grammar from timecode.py: each tag plus the text up
to the next tag becomes one fragment. parse_document() runs parse_line()
over every input line, collects LRC ID tags (``[ti:...]``, ``[offset:...]``),
drops untimed lines, applies the offset, and sorts.

RULES:
- parse_line() never raises; unparseable lines yield an empty list
- A timestamp that fails numeric conversion drops the WHOLE line
- Fragment text is trimmed; angle fragments also lose stray ``[mm:ss.cc]``
  debris before trimming
- Text before the first angle tag is ignored in angle notation
- Fragments in a line and lines in a document are sorted by start (stable)
- ``[offset:+N]`` moves lyrics N ms earlier; results are clamped at 0
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional, Pattern, Tuple

from lrc2ass.core.ir import LyricDocument, LyricLine, TimedFragment
from lrc2ass.core.timecode import (
    ANGLE_TAG_RE,
    BRACKET_TAG_RE,
    TimestampError,
    centiseconds_to_seconds,
    timestamp_to_centiseconds,
    to_centiseconds,
)

logger = logging.getLogger(__name__)

# ID tags such as [ti:Song Title] or [offset:+250]; the key is alphabetic
# so it can never collide with a [mm:ss.cc] timestamp.
_METADATA_TAG_RE = re.compile(r"^\s*\[([A-Za-z]+):([^\]]*)\]\s*$")


def has_angle_tags(line: str) -> bool:
    """True if the line carries at least one ``<mm:ss.cc>`` word tag."""
    return ANGLE_TAG_RE.search(line) is not None


def _split_on_tags(line: str, tag_re: Pattern[str]) -> List[Tuple[int, str]]:
    """Split a line into (centiseconds, raw text) pairs, one per tag.

    Each tag owns the text between its closing delimiter and the next tag
    of the same notation (or the end of the line).
    """
    matches = list(tag_re.finditer(line))
    pairs: List[Tuple[int, str]] = []
    for i, match in enumerate(matches):
        text_end = matches[i + 1].start() if i + 1 < len(matches) else len(line)
        centis = timestamp_to_centiseconds(match.group(1), match.group(2))
        pairs.append((centis, line[match.end():text_end]))
    return pairs


def parse_bracket_line(line: str) -> List[TimedFragment]:
    """Parse ``[mm:ss.cc]text[mm:ss.cc]text`` into fragments.

    Raises:
        TimestampError: If a tag's digits cannot be converted.
    """
    return [
        TimedFragment(start_s=centiseconds_to_seconds(centis), text=text.strip())
        for centis, text in _split_on_tags(line, BRACKET_TAG_RE)
    ]


def parse_angle_line(line: str) -> List[TimedFragment]:
    """Parse ``<mm:ss.cc> word <mm:ss.cc> word`` into fragments.

    Bracket timestamps left inside a word's text (e.g. a repeated line tag
    in the middle of an enhanced LRC line) are removed before trimming.

    Raises:
        TimestampError: If a tag's digits cannot be converted.
    """
    return [
        TimedFragment(
            start_s=centiseconds_to_seconds(centis),
            text=BRACKET_TAG_RE.sub("", text).strip(),
        )
        for centis, text in _split_on_tags(line, ANGLE_TAG_RE)
    ]


def parse_line(raw_line: str) -> List[TimedFragment]:
    """Convert one raw text line into zero or more timed fragments.

    Returns an empty list for lines without a recognizable timestamp tag
    and for lines whose timestamps fail numeric conversion.
    """
    line = raw_line.rstrip("\r\n")
    try:
        if has_angle_tags(line):
            fragments = parse_angle_line(line)
        else:
            fragments = parse_bracket_line(line)
    except TimestampError as exc:
        logger.debug("Dropping line with malformed timestamp %r: %s", line, exc)
        return []
    fragments.sort(key=lambda f: f.start_s)
    return fragments


def strip_timestamps(line: str) -> str:
    """Remove every bracket and angle timestamp tag and trim the result."""
    return ANGLE_TAG_RE.sub("", BRACKET_TAG_RE.sub("", line.rstrip("\r\n"))).strip()


def line_text(line: str) -> str:
    """Plain display text of a timed line, matching what gets highlighted.

    In angle notation the text before the first ``<mm:ss.cc>`` tag is not
    part of any fragment, so it is left out here as well.
    """
    line = line.rstrip("\r\n")
    first_angle = ANGLE_TAG_RE.search(line)
    if first_angle is not None:
        line = line[first_angle.start():]
    return strip_timestamps(line)


def parse_metadata_tag(line: str) -> Optional[Tuple[str, str]]:
    """Parse an LRC ID tag line into a (lowercase key, value) pair.

    Example:
        >>> parse_metadata_tag("[ti:Yesterday]")
        ('ti', 'Yesterday')
    """
    match = _METADATA_TAG_RE.match(line)
    if match is None:
        return None
    return match.group(1).lower(), match.group(2).strip()


def parse_offset(value: str) -> int:
    """Parse an ``[offset:]`` value in milliseconds; invalid values are 0."""
    try:
        return int(value.strip())
    except ValueError:
        logger.warning("Ignoring invalid offset tag value %r", value)
        return 0


def _apply_offset(lines: List[LyricLine], offset_ms: int) -> None:
    """Shift every fragment earlier by offset_ms, clamped at zero."""
    shift = int(round(offset_ms / 10.0))
    for line in lines:
        for frag in line.fragments:
            centis = max(0, to_centiseconds(frag.start_s) - shift)
            frag.start_s = centiseconds_to_seconds(centis)


def parse_document(lines: Iterable[str]) -> LyricDocument:
    """Parse all input lines into a sorted LyricDocument.

    WHY: End times are derived from the next line's start, so lines must
    be in chronological order before the renderer sees them. LRC files
    are frequently hand-edited and out of order.

    HOW: Parse each line; keep timed lines, record ID tags, skip the rest.
    Apply the ``[offset:]`` tag, then stable-sort lines by start time.

    Args:
        lines: Raw text lines (with or without trailing newlines).

    Returns:
        LyricDocument with timed lines sorted by start time.
    """
    metadata = {}
    parsed: List[LyricLine] = []
    skipped = 0

    for raw in lines:
        fragments = parse_line(raw)
        if fragments:
            parsed.append(LyricLine(fragments=fragments, text=line_text(raw)))
            continue

        tag = parse_metadata_tag(raw)
        if tag is not None:
            metadata[tag[0]] = tag[1]
        elif raw.strip():
            skipped += 1
            logger.debug("Skipping untimed line %r", raw.rstrip("\r\n"))

    offset_ms = parse_offset(metadata["offset"]) if "offset" in metadata else 0
    if offset_ms:
        _apply_offset(parsed, offset_ms)

    parsed.sort(key=lambda line: line.start_s)

    logger.info(
        "Parsed %d timed lines (%d untimed lines skipped, offset %d ms)",
        len(parsed), skipped, offset_ms,
    )
    return LyricDocument(lines=parsed, metadata=metadata, offset_ms=offset_ms)
