"""Environment-driven defaults and .env loading.

WHY: Teams converting whole lyric libraries want one place to set their
preferred preset, file encoding, and fallback pads without repeating CLI
flags. Environment variables (optionally from a .env file) provide that.

HOW: python-dotenv loads the .env file on import. Plain defaults are
module-level constants; env_overrides() turns the optional numeric and
boolean variables into KaraokeConfig override values.

RULES:
- LRC2ASS_PRESET selects the base preset (default "karaoke")
- LRC2ASS_ENCODING sets the input text encoding (default "utf-8-sig",
  which also strips a leading BOM)
- LRC2ASS_SYLLABLE_FALLBACK_S / LRC2ASS_DOCUMENT_FALLBACK_S override the
  preset's fallback pads; LRC2ASS_NEXT_LINE_PREVIEW toggles the preview
- Invalid values raise ValueError naming the variable
- CLI flags and config files take precedence over the environment
"""

from __future__ import annotations

import os
from typing import Any, Dict

from dotenv import load_dotenv

# Load .env from the working directory (where the converter is run from)
load_dotenv()

DEFAULT_PRESET = os.getenv("LRC2ASS_PRESET", "karaoke")
DEFAULT_ENCODING = os.getenv("LRC2ASS_ENCODING", "utf-8-sig")

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def _env_float(name: str) -> float | None:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        raise ValueError("{} must be a number of seconds, got '{}'".format(name, raw)) from None


def _env_bool(name: str) -> bool | None:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return None
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise ValueError("{} must be true or false, got '{}'".format(name, raw))


def env_overrides() -> Dict[str, Any]:
    """Collect KaraokeConfig overrides from the environment.

    Returns:
        Dict of field name → value for every variable that is set.

    Raises:
        ValueError: If a variable is set to an unparseable value.
    """
    overrides: Dict[str, Any] = {
        "syllable_fallback_s": _env_float("LRC2ASS_SYLLABLE_FALLBACK_S"),
        "document_fallback_s": _env_float("LRC2ASS_DOCUMENT_FALLBACK_S"),
        "next_line_preview": _env_bool("LRC2ASS_NEXT_LINE_PREVIEW"),
    }
    return {k: v for k, v in overrides.items() if v is not None}
