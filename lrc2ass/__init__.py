"""lrc2ass — LRC lyrics to ASS karaoke subtitles.

WHY: Lyric files (LRC) carry per-line or per-syllable start times, but
video players need ASS subtitles with ``\\k`` karaoke tags to highlight
lyrics as they are sung. This package derives highlight durations from
the LRC timestamps and writes a complete ASS file.

HOW: Three-stage pipeline — parse (core.parser builds a sorted
LyricDocument), time (core.karaoke derives end times and ``\\k`` markup),
format (formatters.ass_karaoke writes the ASS sections). convert_text()
runs all three in memory; the CLI adds file handling on top.

RULES:
- One KaraokeConfig drives every timing policy decision
- End times are always derived from the next start time or a fallback
- convert_text() performs no I/O
"""

from __future__ import annotations

from typing import Iterable, Optional, Union

from lrc2ass.core.parser import parse_document
from lrc2ass.formatters import DEFAULT_FORMAT, FORMATTERS
from lrc2ass.presets import KaraokeConfig, resolve_config

__version__ = "0.1.0"

__all__ = [
    "convert_text",
    "KaraokeConfig",
    "resolve_config",
    "parse_document",
]


def convert_text(
    lrc: Union[str, Iterable[str]],
    config: Optional[KaraokeConfig] = None,
) -> str:
    """Convert LRC content into an ASS document string.

    Args:
        lrc: The whole LRC text, or an iterable of its lines.
        config: Timing and style policy. Default: the "karaoke" preset.

    Returns:
        The complete ASS file content.
    """
    lines = lrc.splitlines() if isinstance(lrc, str) else lrc
    document = parse_document(lines)
    formatter = FORMATTERS[DEFAULT_FORMAT](config if config is not None else resolve_config())
    return formatter.format(document)[0].content
