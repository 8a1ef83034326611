"""Abstract base formatter and output container.

WHY: The CLI and the library entry point should not care how a parsed
LyricDocument becomes file content. A small formatter interface keeps
the writer swappable and testable on its own.

HOW: BaseFormatter is an ABC with two requirements — a ``name`` property
and a ``format()`` method. FormatterOutput is a plain dataclass that
bundles a file suffix with its content and MIME type.

RULES:
- Subclasses MUST implement ``name`` (human-readable) and ``format()``
- ``format()`` returns a list of FormatterOutput objects
- ``suffix`` includes the dot, e.g. ``".ass"``
- Formatters never mutate the LyricDocument
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List

from lrc2ass.core.ir import LyricDocument


@dataclass
class FormatterOutput:
    """One output file produced by a formatter.

    Attributes:
        suffix: File suffix used when deriving an output name from the
                input stem, e.g. ``".ass"`` → ``"song.ass"``.
        content: The complete file content.
        media_type: MIME type for the content, e.g. ``"text/x-ssa"``.
    """

    suffix: str
    content: str
    media_type: str


class BaseFormatter(ABC):
    """Abstract base for all output formatters.

    To add a new output format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter
    3. Implement format() and name
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'ASS Karaoke'."""

    @abstractmethod
    def format(self, document: LyricDocument) -> List[FormatterOutput]:
        """Convert a parsed LyricDocument into output files.

        Args:
            document: Timed lines sorted by start time, plus LRC metadata.

        Returns:
            List of FormatterOutput objects.
        """
