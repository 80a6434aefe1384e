"""Command-line front door for vinyard.

Parses CLI options, sets up logging and config, and loads the target file.
Then hands control to the interactive editor runtime.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from . import __version__
from .config import load_editor_config
from .runtime import open_document, run_editor
from .terminal import CLEAR_SCREEN, TerminalError

EXIT_FATAL = 1
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def configure_logging(log_file: Path | None) -> None:
    """Send package logs to ``log_file``; without one they are discarded."""
    if log_file is None:
        return
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger = logging.getLogger("vinyard")
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and launch the editor, exiting with its status code."""
    parser = argparse.ArgumentParser(description="Modal terminal text editor.")
    parser.add_argument("path", nargs="?", default=None, help="File to edit. Opens an unnamed buffer when omitted.")
    parser.add_argument("--tab-stop", type=_positive_int, default=None, help="Tab display width (default: config or 2).")
    parser.add_argument("--log-file", type=Path, default=None, help="Append debug logs to this file.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    args = parser.parse_args(argv)

    configure_logging(args.log_file)
    config = load_editor_config()
    if args.tab_stop is not None:
        config = replace(config, tab_stop=args.tab_stop)

    path = Path(args.path) if args.path is not None else None
    if path is not None and path.is_dir():
        raise SystemExit(f"Is a directory: {path}")
    try:
        document = open_document(path, config.tab_stop)
    except OSError as exc:
        raise SystemExit(f"Cannot open {path}: {exc.strerror or exc}") from exc

    try:
        exit_code = run_editor(document, config, sys.stdin.fileno(), sys.stdout.fileno())
    except TerminalError as exc:
        sys.stdout.write(CLEAR_SCREEN.decode("ascii"))
        sys.stdout.flush()
        sys.stderr.write(f"vinyard: {exc}\n")
        raise SystemExit(EXIT_FATAL) from exc
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
