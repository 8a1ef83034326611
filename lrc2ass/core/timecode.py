"""Shared timestamp grammar and clock conversions.

WHY: Both LRC notations (``[mm:ss.cc]`` line/syllable tags and
``<mm:ss.cc>`` word tags) use the same numeric timestamp. Keeping one
grammar here means the bracket and angle parsers can never drift apart,
and the ASS writer formats times with the same centisecond arithmetic
the parser used to read them.

HOW: TIMESTAMP_PATTERN is the single grammar; BRACKET_TAG_RE and
ANGLE_TAG_RE wrap it in their delimiters. All conversions go through
integer centiseconds so ``parse -> seconds -> format`` reproduces the
input clock exactly.

RULES:
- seconds = minutes * 60 + fractional seconds
- Two-digit fractions are exact; three-digit (millisecond) fractions are
  rounded half-up to centiseconds
- ASS clock format is ``H:MM:SS.CC``: hours unpadded, the rest two digits
- Negative times are clamped to zero when formatting
"""

from __future__ import annotations

import re

TIMESTAMP_PATTERN = r"(\d+):(\d{1,2}(?:\.\d{1,3})?)"
"""minutes:seconds[.fraction] — the one grammar both notations share."""

BRACKET_TAG_RE = re.compile(r"\[" + TIMESTAMP_PATTERN + r"\]")
ANGLE_TAG_RE = re.compile(r"<" + TIMESTAMP_PATTERN + r">")

_TIMESTAMP_RE = re.compile(TIMESTAMP_PATTERN)

CENTISECONDS_PER_SECOND = 100
CENTISECONDS_PER_MINUTE = 60 * CENTISECONDS_PER_SECOND
CENTISECONDS_PER_HOUR = 60 * CENTISECONDS_PER_MINUTE


class TimestampError(ValueError):
    """Raised when timestamp digits cannot be converted to a time."""


def timestamp_to_centiseconds(minutes: str, seconds: str) -> int:
    """Convert captured ``minutes`` and ``seconds[.fraction]`` to centiseconds.

    Args:
        minutes: Digits before the colon, e.g. ``"02"``.
        seconds: Seconds with optional fraction, e.g. ``"05.30"``.

    Returns:
        Integer centiseconds, e.g. 12530 for ``"02"``, ``"05.30"``.

    Raises:
        TimestampError: If any captured part is not a valid number.
    """
    whole, _, fraction = seconds.partition(".")
    try:
        total = int(minutes) * CENTISECONDS_PER_MINUTE + int(whole) * CENTISECONDS_PER_SECOND
        if len(fraction) == 1:
            total += int(fraction) * 10
        elif len(fraction) == 2:
            total += int(fraction)
        elif len(fraction) == 3:
            total += (int(fraction) + 5) // 10
    except ValueError as exc:
        raise TimestampError(
            "Invalid timestamp '{}:{}'".format(minutes, seconds)
        ) from exc
    return total


def parse_timestamp(value: str) -> float:
    """Parse a bare ``mm:ss.cc`` string into float seconds.

    Raises:
        TimestampError: If the string does not match the timestamp grammar.
    """
    match = _TIMESTAMP_RE.fullmatch(value.strip())
    if match is None:
        raise TimestampError("Invalid timestamp '{}'".format(value))
    return centiseconds_to_seconds(timestamp_to_centiseconds(match.group(1), match.group(2)))


def centiseconds_to_seconds(centiseconds: int) -> float:
    return centiseconds / CENTISECONDS_PER_SECOND


def to_centiseconds(seconds: float) -> int:
    """Round float seconds to the nearest integer centisecond."""
    return int(round(seconds * CENTISECONDS_PER_SECOND))


def format_ass_time(seconds: float) -> str:
    """Format float seconds as an ASS clock string.

    WHY: ASS events use ``H:MM:SS.CC``; a formatter that truncates
    instead of rounding turns ``125.30`` into ``0:02:05.29``.

    HOW: Round once to integer centiseconds, then split with divmod.

    Example:
        >>> format_ass_time(89.85)
        '0:01:29.85'
    """
    total = max(0, to_centiseconds(seconds))
    hours, rest = divmod(total, CENTISECONDS_PER_HOUR)
    minutes, rest = divmod(rest, CENTISECONDS_PER_MINUTE)
    secs, centis = divmod(rest, CENTISECONDS_PER_SECOND)
    return "{}:{:02d}:{:02d}.{:02d}".format(hours, minutes, secs, centis)
