"""Core parsing, timing, and IR modules.

WHY: The core package contains the timing engine — the IR dataclasses,
the LRC line parser, and the karaoke renderer. Formatters consume what
it produces and never reimplement timing.

HOW: ir.py defines the data structures, timecode.py the shared timestamp
grammar, parser.py builds LyricDocuments from text lines, karaoke.py
derives durations and ``\\k`` markup.

RULES:
- IR dataclasses are the contract — change with care
- Timing logic lives in karaoke.py only
- No file I/O in this package
"""
