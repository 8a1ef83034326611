"""Output formatter registry.

WHY: The CLI and the library entry point look formatters up by name, so a
new output flavour is one new module plus one line here.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["ass_karaoke"](config)``.

RULES:
- Keys are snake_case identifiers
- Values are BaseFormatter subclasses (not instances)
- Every formatter listed here must be importable without side effects
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from lrc2ass.formatters.ass_karaoke import ASSKaraokeFormatter

if TYPE_CHECKING:
    from lrc2ass.formatters.base import BaseFormatter

DEFAULT_FORMAT = "ass_karaoke"

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "ass_karaoke": ASSKaraokeFormatter,
}
