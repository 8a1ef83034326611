"""ASS karaoke formatter — ``[Script Info]``, ``[V4+ Styles]``, ``[Events]``.

WHY: Video players and editors (mpv, Aegisub, ffmpeg's subtitles filter)
render ``\\k`` karaoke tags from ASS files. This formatter turns the
timing pass output into a complete, loadable ASS document.

HOW: render_document() produces RenderedLine objects. The three sections
are then built as lists of lines: script info from the config (title
falls back to the LRC ``[ti:]`` tag), one ``Style:`` row per configured
AssStyle, and one ``Dialogue:`` event per line, plus a preview event on
the preview style when enabled.

RULES:
- Section order: [Script Info], [V4+ Styles], [Events]
- Event columns: Layer, Start, End, Style, Name, MarginL, MarginR,
  MarginV, Effect, Text with Layer=0, margins 0, Name/Effect empty
- Timecodes use format_ass_time (``H:MM:SS.CC``)
- Preview events share the primary event's start and end
- Output uses ``\\n`` line endings and ends with a newline
"""

from __future__ import annotations

from typing import List, Optional

from lrc2ass.core.ir import LyricDocument, RenderedLine
from lrc2ass.core.karaoke import render_document
from lrc2ass.core.timecode import format_ass_time
from lrc2ass.formatters.base import BaseFormatter, FormatterOutput
from lrc2ass.presets import STYLE_FORMAT, AssStyle, KaraokeConfig, resolve_config

EVENT_FORMAT = "Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text"


def dialogue_line(start_s: float, end_s: float, style: str, text: str) -> str:
    """Build one ``Dialogue:`` event line."""
    return "Dialogue: 0,{start},{end},{style},,0,0,0,,{text}".format(
        start=format_ass_time(start_s),
        end=format_ass_time(end_s),
        style=style,
        text=text,
    )


def build_script_info(config: KaraokeConfig, title: Optional[str] = None) -> List[str]:
    return [
        "[Script Info]",
        "Title: {}".format(title or config.title),
        "ScriptType: v4.00+",
        "PlayResX: {}".format(config.play_res_x),
        "PlayResY: {}".format(config.play_res_y),
        "Timer: 100.0000",
    ]


def build_styles(styles: List[AssStyle]) -> List[str]:
    lines = ["[V4+ Styles]", "Format: {}".format(STYLE_FORMAT)]
    lines.extend(style.to_ass() for style in styles)
    return lines


def build_events(rendered: List[RenderedLine], config: KaraokeConfig) -> List[str]:
    """Build the ``[Events]`` section from rendered lines.

    Each line yields its karaoke event; when a preview text is attached,
    a second event on the preview style follows it.
    """
    lines = ["[Events]", "Format: {}".format(EVENT_FORMAT)]
    for line in rendered:
        lines.append(dialogue_line(line.start_s, line.end_s, config.primary_style, line.markup))
        if line.preview_text:
            lines.append(dialogue_line(
                line.start_s, line.end_s, config.preview_style, line.preview_text,
            ))
    return lines


class ASSKaraokeFormatter(BaseFormatter):
    """Formatter producing one ASS subtitle file with karaoke highlighting.

    RULES:
    - Returns a 1-element list with suffix ".ass"
    - An empty document still produces a valid ASS file with no events
    - Configurable via constructor: a KaraokeConfig (default preset if None)
    """

    def __init__(self, config: Optional[KaraokeConfig] = None) -> None:
        self.config = config if config is not None else resolve_config()

    @property
    def name(self) -> str:
        return "ASS Karaoke"

    def format(self, document: LyricDocument) -> List[FormatterOutput]:
        """Convert the LyricDocument into an ASS file.

        Args:
            document: Parsed document with lines sorted by start time.

        Returns:
            A single FormatterOutput holding the ASS document.
        """
        rendered = render_document(document, self.config)

        sections = [
            build_script_info(self.config, document.title),
            build_styles(self.config.styles),
            build_events(rendered, self.config),
        ]
        content = "\n\n".join("\n".join(section) for section in sections) + "\n"

        return [
            FormatterOutput(
                suffix=".ass",
                content=content,
                media_type="text/x-ssa",
            )
        ]
