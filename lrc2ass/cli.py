"""Command-line interface for the LRC → ASS karaoke converter.

WHY: Users convert lyric files from the terminal or from batch scripts.
The CLI wires together configuration (preset, env, config file, flags),
file reading, the conversion pipeline, and a safe output write behind a
single command.

HOW: Uses argparse to accept the input and output paths plus timing and
style options. Builds a KaraokeConfig, reads the input lines, parses and
formats them, and writes the result through a temp file that is
atomically renamed over the output path. Status messages go to stderr.

RULES:
- Positional arguments: input LRC path, output ASS path
- Missing positionals print the usage and exit with status 0
- Config precedence: preset < environment < --config file < flags
- Preset choice: --preset, else the config file's "preset", else
  LRC2ASS_PRESET / "karaoke"
- The output file keeps an existing file's mode, else umask-based 0666
- Read/write failures print "Error: ..." to stderr and exit with status 1
- Invalid presets or config files print "Error: ..." and exit with status 1
- The output file is never left half-written
"""

from __future__ import annotations

import argparse
import contextlib
import logging
import os
import stat
import sys
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

from lrc2ass.config import DEFAULT_ENCODING, DEFAULT_PRESET, env_overrides
from lrc2ass.core.parser import parse_document
from lrc2ass.formatters import DEFAULT_FORMAT, FORMATTERS
from lrc2ass.presets import GRANULARITIES, PRESETS, KaraokeConfig, load_config_file, resolve_config

logger = logging.getLogger(__name__)


def _status(msg: str) -> None:
    """Print a status message to stderr.

    Status output must not pollute stdout so the CLI can be piped.
    """
    print(msg, file=sys.stderr, flush=True)


def _error(msg: str) -> None:
    print("Error: {}".format(msg), file=sys.stderr, flush=True)
    sys.exit(1)


def _build_config(args: argparse.Namespace) -> KaraokeConfig:
    """Resolve the KaraokeConfig for this run.

    HOW: Pick the preset (--preset, else the config file's, else
    DEFAULT_PRESET), then layer environment overrides, config file
    values, and explicit flags.

    Raises:
        ValueError: Unknown preset, invalid env value, or invalid config.
        OSError: If the config file cannot be read.
    """
    file_preset = None
    overrides: Dict[str, Any] = env_overrides()

    if args.config:
        file_values = load_config_file(args.config)
        file_preset = file_values.pop("preset", None)
        overrides.update(file_values)

    preset = args.preset or file_preset or DEFAULT_PRESET

    flag_values = {
        "granularity": args.granularity,
        "syllable_fallback_s": args.syllable_fallback,
        "document_fallback_s": args.document_fallback,
        "next_line_preview": args.preview,
    }
    overrides.update({k: v for k, v in flag_values.items() if v is not None})

    return resolve_config(preset, overrides)


def _read_lines(input_path: Path, encoding: str) -> List[str]:
    """Read the input file as text lines.

    Undecodable bytes are replaced rather than aborting the run; encoding
    detection is out of scope.
    """
    with open(input_path, "r", encoding=encoding, errors="replace") as f:
        return [line.rstrip("\r\n") for line in f]


def _output_mode(output_path: Path) -> int:
    """Permission bits for the output file.

    An existing file keeps its mode; a new one gets what open() would
    give it under the current umask.
    """
    try:
        return stat.S_IMODE(os.stat(output_path).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def _save_output(content: str, output_path: Path) -> Path:
    """Write content to output_path via a temp file and atomic rename.

    WHY: A crash or full disk mid-write must not leave a truncated ASS
    file that looks valid.

    HOW: Write to a hidden temp file in the target directory, give it the
    output's permission bits, then os.replace() it over the destination.
    The temp file is removed if anything fails.

    Raises:
        OSError: If the directory is missing or not writable.
    """
    fd, tmp_name = tempfile.mkstemp(
        prefix=".{}.".format(output_path.name),
        suffix=".tmp",
        dir=str(output_path.parent),
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(content)
        os.chmod(tmp_name, _output_mode(output_path))
        os.replace(tmp_name, output_path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_name)
        raise
    return output_path


def _run(args: argparse.Namespace) -> None:
    """Execute one conversion: config → read → parse → format → write."""
    input_path = Path(args.input_file)
    output_path = Path(args.output_file)

    try:
        config = _build_config(args)
    except (ValueError, OSError) as e:
        _error(str(e))

    try:
        raw_lines = _read_lines(input_path, args.encoding)
    except LookupError:
        _error("Unknown encoding '{}'".format(args.encoding))
    except OSError as e:
        _error("Cannot open input file {}: {}".format(input_path, e.strerror or e))

    document = parse_document(raw_lines)
    if not document.lines:
        logger.warning("No timed lines found in %s", input_path)

    formatter = FORMATTERS[DEFAULT_FORMAT](config)
    outputs = formatter.format(document)

    try:
        _save_output(outputs[0].content, output_path)
    except OSError as e:
        _error("Cannot create output file {}: {}".format(output_path, e.strerror or e))

    _status("Converted {} to {}".format(input_path, output_path))


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    Separate from main() so tests can inspect the parser without running
    a conversion.
    """
    parser = argparse.ArgumentParser(
        prog="lrc2ass",
        description="Convert LRC lyric files into ASS subtitles with karaoke highlighting.",
    )

    parser.add_argument("input_file", nargs="?", help="Path to the input .lrc file.")
    parser.add_argument("output_file", nargs="?", help="Path of the .ass file to write.")

    parser.add_argument(
        "--preset",
        default=None,
        help="Timing/style preset. Available: {} (default: the --config file's "
        "preset, else {}).".format(", ".join(sorted(PRESETS)), DEFAULT_PRESET),
    )

    parser.add_argument(
        "--config",
        default=None,
        help="JSON file with config overrides (fallbacks, styles, resolution).",
    )

    parser.add_argument(
        "--granularity",
        choices=GRANULARITIES,
        default=None,
        help="Highlight per syllable, per character, or auto (preset default).",
    )

    parser.add_argument(
        "--preview",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Show the next line on the NextLine style (preset default).",
    )

    parser.add_argument(
        "--syllable-fallback",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Highlight length of a line's last syllable with no successor.",
    )

    parser.add_argument(
        "--document-fallback",
        type=float,
        default=None,
        metavar="SECONDS",
        help="How long the final line stays on screen.",
    )

    parser.add_argument(
        "--encoding",
        default=DEFAULT_ENCODING,
        help="Input text encoding (default: %(default)s).",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log parsing details to stderr.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.input_file or not args.output_file:
        parser.print_usage()
        return

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    _run(args)


if __name__ == "__main__":
    main()
