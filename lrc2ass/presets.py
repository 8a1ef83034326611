"""Karaoke configuration, ASS styles, and named presets.

WHY: The same LRC → ASS conversion is wanted with different policies:
per-syllable or per-character highlighting, how long the last syllable
and the last line stay lit, and whether the next line is previewed.
These are configuration decisions, not code paths, so one engine reads
them from a single KaraokeConfig.

HOW: KaraokeConfig holds the timing policy and the ASS presentation
(script info, styles). AssStyle is one ``Style:`` row of the
``[V4+ Styles]`` section. PRESETS maps names to ready-made configs;
resolve_config() copies a preset and applies overrides. JSON override
files are validated with jsonschema against config_schema.json.

RULES:
- Presets are frozen constants — never mutate them at runtime.
- resolve_config() always returns a deep copy.
- granularity is one of "syllable", "character", "auto".
- Fallbacks are positive, finite seconds; min_centiseconds is at least 1.
- Style overrides are merged by style name; unknown names create a new
  style based on DEFAULT_STYLE.
"""

from __future__ import annotations

import copy
import dataclasses
import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import jsonschema

GRANULARITY_SYLLABLE = "syllable"
GRANULARITY_CHARACTER = "character"
GRANULARITY_AUTO = "auto"
GRANULARITIES = (GRANULARITY_SYLLABLE, GRANULARITY_CHARACTER, GRANULARITY_AUTO)

STYLE_FORMAT = (
    "Name, Fontname, Fontsize, PrimaryColour, SecondaryColour, OutlineColour, "
    "BackColour, Bold, Italic, Underline, StrikeOut, ScaleX, ScaleY, Spacing, "
    "Angle, BorderStyle, Outline, Shadow, Alignment, MarginL, MarginR, MarginV, "
    "Encoding"
)

_SCHEMA_PATH = Path(__file__).resolve().parent / "config_schema.json"

_CACHED_SCHEMA: Optional[dict] = None


def _get_schema() -> dict:
    """Load and cache the config override JSON schema."""
    global _CACHED_SCHEMA
    if _CACHED_SCHEMA is None:
        with open(_SCHEMA_PATH, encoding="utf-8") as f:
            _CACHED_SCHEMA = json.load(f)
    return _CACHED_SCHEMA


def _format_number(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass
class AssStyle:
    """One row of the ASS ``[V4+ Styles]`` table.

    Colours are ASS ``&HAABBGGRR`` strings; Bold/Italic/Underline/StrikeOut
    use the ASS convention of -1 for on and 0 for off.
    """

    name: str
    fontname: str = "Arial"
    fontsize: float = 17
    primary_colour: str = "&H00FFFFFF"
    secondary_colour: str = "&H000000FF"
    outline_colour: str = "&H00000000"
    back_colour: str = "&H64000000"
    bold: int = 0
    italic: int = 0
    underline: int = 0
    strike_out: int = 0
    scale_x: float = 100
    scale_y: float = 100
    spacing: float = 0
    angle: float = 0
    border_style: int = 1
    outline: float = 3
    shadow: float = 0
    alignment: int = 2
    margin_l: int = 10
    margin_r: int = 10
    margin_v: int = 50
    encoding: int = 1

    def to_ass(self) -> str:
        """Render as a ``Style:`` line in STYLE_FORMAT column order."""
        values = [
            self.name,
            self.fontname,
            _format_number(self.fontsize),
            self.primary_colour,
            self.secondary_colour,
            self.outline_colour,
            self.back_colour,
            str(self.bold),
            str(self.italic),
            str(self.underline),
            str(self.strike_out),
            _format_number(self.scale_x),
            _format_number(self.scale_y),
            _format_number(self.spacing),
            _format_number(self.angle),
            str(self.border_style),
            _format_number(self.outline),
            _format_number(self.shadow),
            str(self.alignment),
            str(self.margin_l),
            str(self.margin_r),
            str(self.margin_v),
            str(self.encoding),
        ]
        return "Style: " + ",".join(values)


# Primary karaoke line
DEFAULT_STYLE = AssStyle(name="Default", bold=-1)

# Dimmed preview of the upcoming line, sitting above the primary line
NEXT_LINE_STYLE = AssStyle(
    name="NextLine",
    fontsize=15,
    primary_colour="&H00666666",
    outline=1,
    margin_v=100,
)


def _default_styles() -> List[AssStyle]:
    return [copy.deepcopy(DEFAULT_STYLE), copy.deepcopy(NEXT_LINE_STYLE)]


@dataclass
class KaraokeConfig:
    """Timing policy and presentation for one conversion run.

    Attributes:
        granularity: "syllable" wraps each fragment in one ``\\k`` tag,
            "character" spreads each fragment's duration over its
            characters, "auto" uses character mode for lines with a single
            timed fragment and syllable mode otherwise.
        syllable_fallback_s: Highlight length of a line's last syllable
            when no successor timestamp exists.
        document_fallback_s: How long the last line of the document stays
            on screen after its last timestamp.
        extend_to_next_line: If True, a line lasts until the next line
            starts; if False it ends ``syllable_fallback_s`` after its last
            fragment.
        min_centiseconds: Floor for every emitted ``\\k`` value.
        next_line_preview: Emit the next line's plain text on the preview
            style alongside every line.
        title, play_res_x, play_res_y: ``[Script Info]`` values.
        primary_style, preview_style: Style names used by the events.
        styles: Rows of the ``[V4+ Styles]`` section.
    """

    granularity: str = GRANULARITY_AUTO
    syllable_fallback_s: float = 0.5
    document_fallback_s: float = 3.0
    extend_to_next_line: bool = True
    min_centiseconds: int = 1
    next_line_preview: bool = True
    title: str = "LRC to ASS"
    play_res_x: int = 1280
    play_res_y: int = 720
    primary_style: str = "Default"
    preview_style: str = "NextLine"
    styles: List[AssStyle] = field(default_factory=_default_styles)

    def __post_init__(self) -> None:
        if self.granularity not in GRANULARITIES:
            raise ValueError(
                "Unknown granularity '{}'. Available: {}".format(
                    self.granularity, ", ".join(GRANULARITIES)
                )
            )
        fallbacks = (self.syllable_fallback_s, self.document_fallback_s)
        if not all(math.isfinite(value) and value > 0 for value in fallbacks):
            raise ValueError("Fallback durations must be positive, finite seconds")
        if self.min_centiseconds < 1:
            raise ValueError("min_centiseconds must be at least 1")


PRESET_KARAOKE = KaraokeConfig()

PRESET_SYLLABLE = KaraokeConfig(granularity=GRANULARITY_SYLLABLE)

# Whole-line LRC: every character lights up evenly, long final hold
PRESET_LINE = KaraokeConfig(
    granularity=GRANULARITY_CHARACTER,
    document_fallback_s=5.0,
    next_line_preview=False,
)

# Every line ends one second after its last syllable
PRESET_CLASSIC = KaraokeConfig(
    granularity=GRANULARITY_SYLLABLE,
    syllable_fallback_s=1.0,
    document_fallback_s=1.0,
    extend_to_next_line=False,
)

PRESETS: Dict[str, KaraokeConfig] = {
    "karaoke": PRESET_KARAOKE,
    "syllable": PRESET_SYLLABLE,
    "line": PRESET_LINE,
    "classic": PRESET_CLASSIC,
}

_CONFIG_FIELDS = frozenset(f.name for f in dataclasses.fields(KaraokeConfig))


def _merge_styles(base: List[AssStyle], overrides: List[Dict[str, Any]]) -> List[AssStyle]:
    """Merge style override dicts into a style list by name."""
    merged = list(base)
    for override in overrides:
        fields = dict(override)
        name = fields["name"]
        for i, style in enumerate(merged):
            if style.name == name:
                merged[i] = dataclasses.replace(style, **fields)
                break
        else:
            merged.append(dataclasses.replace(DEFAULT_STYLE, **fields))
    return merged


def resolve_config(
    preset: str = "karaoke",
    overrides: Optional[Dict[str, Any]] = None,
) -> KaraokeConfig:
    """Return a fresh KaraokeConfig for a preset name plus overrides.

    Args:
        preset: Key in PRESETS.
        overrides: KaraokeConfig field values; ``styles`` is a list of
            style dicts merged by name. None values are ignored.

    Returns:
        A deep copy of the preset with overrides applied.

    Raises:
        ValueError: If the preset or an override field is unknown, or the
            resulting config is invalid.
    """
    if preset not in PRESETS:
        raise ValueError(
            "Unknown preset '{}'. Available: {}".format(preset, ", ".join(PRESETS.keys()))
        )
    cfg = copy.deepcopy(PRESETS[preset])
    if not overrides:
        return cfg

    values = {k: v for k, v in overrides.items() if v is not None}
    unknown = sorted(set(values) - _CONFIG_FIELDS)
    if unknown:
        raise ValueError("Unknown config field(s): {}".format(", ".join(unknown)))

    style_overrides = values.pop("styles", None)
    cfg = dataclasses.replace(cfg, **values)
    if style_overrides:
        cfg.styles = _merge_styles(cfg.styles, style_overrides)
    return cfg


def load_config_file(path: str | Path) -> Dict[str, Any]:
    """Load and validate a JSON config override file.

    WHY: Users tune fonts, colours, and fallbacks per project without
    touching code. Validating up front turns a typo into a clear error
    instead of a broken ASS file.

    HOW: json.load the file and validate it against config_schema.json.
    An optional top-level ``preset`` key selects the base preset.

    Raises:
        ValueError: If the file is not valid JSON or fails validation.
        OSError: If the file cannot be read.
    """
    with open(path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValueError("Config file {} is not valid JSON: {}".format(path, exc)) from exc

    try:
        jsonschema.validate(instance=data, schema=_get_schema())
    except jsonschema.ValidationError as exc:
        raise ValueError("Invalid config file {}: {}".format(path, exc.message)) from exc
    return data
