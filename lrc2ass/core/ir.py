"""Intermediate representation dataclasses for parsed lyric documents.

WHY: LRC files are a flat list of text lines with inline timestamp tags.
The renderer needs ordered, typed fragments and lines so it can derive
end times and karaoke durations in one place. The IR decouples the text
parser from the ASS writer.

HOW: Four dataclasses form a hierarchy:
  TimedFragment — one timed unit of text (syllable, word, or whole line)
  LyricLine     — the fragments of one physical input line
  LyricDocument — all timed lines plus LRC ID-tag metadata
  RenderedLine  — output of the timing pass, ready for the ASS formatter

RULES:
- All times are float seconds, exact to the centisecond
- End times are NEVER stored on fragments or lines; they are derived from
  the next start time (or a configured fallback) during rendering
- Fragments inside a line and lines inside a document are kept sorted by
  start time before any end time is derived
- Empty fragment text is allowed only for timing boundaries that are
  filtered out before rendering
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class TimedFragment:
    """A single timed unit of lyric text.

    RULES:
    - start_s >= 0
    - text is already trimmed; empty text marks a pure timing boundary
    """

    start_s: float
    text: str


@dataclass
class LyricLine:
    """The fragments parsed from one physical input line.

    WHY: Karaoke events are emitted per displayed line, but highlight
    timing is per fragment. The line groups fragments and keeps the plain
    display text for the next-line preview.

    RULES:
    - fragments: sorted by start_s, never empty
    - text: the raw line with every timestamp tag removed, trimmed
    - start_s is the first visible fragment's start; leading empty
      boundaries are ignored
    """

    fragments: List[TimedFragment] = field(default_factory=list)
    text: str = ""

    @property
    def start_s(self) -> float:
        """Start of the first visible fragment (first boundary if blank)."""
        timed = self.timed_fragments
        if timed:
            return timed[0].start_s
        return self.fragments[0].start_s

    @property
    def timed_fragments(self) -> List[TimedFragment]:
        """Fragments that carry visible text."""
        return [f for f in self.fragments if f.text]

    @property
    def is_blank(self) -> bool:
        """True when the line only holds timing boundaries."""
        return not self.timed_fragments

    @property
    def end_marker_s(self) -> Optional[float]:
        """Start of the first empty fragment after the last visible one.

        A trailing ``[mm:ss.cc]`` tag with no text closes the line
        explicitly, e.g. ``[00:01.00]Hello[00:02.00]``.
        """
        last_index = None
        for i, frag in enumerate(self.fragments):
            if frag.text:
                last_index = i
        if last_index is None or last_index + 1 >= len(self.fragments):
            return None
        return self.fragments[last_index + 1].start_s


@dataclass
class LyricDocument:
    """A parsed LRC file.

    RULES:
    - lines: timed lines only, sorted by start_s (stable)
    - metadata: LRC ID tags keyed by lowercase tag name ("ti", "ar", ...)
    - offset_ms: the ``[offset:]`` value already applied to every timestamp
    """

    lines: List[LyricLine] = field(default_factory=list)
    metadata: Dict[str, str] = field(default_factory=dict)
    offset_ms: int = 0

    @property
    def title(self) -> Optional[str]:
        return self.metadata.get("ti") or None


@dataclass
class RenderedLine:
    """One subtitle event produced by the timing pass.

    RULES:
    - end_s > start_s
    - markup: concatenated ``{\\kN}text`` units
    - preview_text: next line's plain text, or None when there is no preview
    """

    start_s: float
    end_s: float
    markup: str
    text: str
    preview_text: Optional[str] = None
