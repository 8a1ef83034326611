"""Package entry point for ``python -m lrc2ass``.

WHY: Users run the converter as ``python -m lrc2ass song.lrc song.ass``.
Python's ``-m`` flag looks for ``__main__.py`` inside the package and
executes it.

HOW: Delegates to the CLI's main() function.
"""

from lrc2ass.cli import main

if __name__ == "__main__":
    main()
