"""Command-line front door for mqtui.

Parses CLI options, loads the Markdown file and merges settings from the
config file. Then dispatches into the interactive runtime.
"""

from __future__ import annotations

import argparse
import logging
import logging.handlers
from collections.abc import Sequence
from pathlib import Path

from platformdirs import user_config_dir

from .app import App
from .config import APP_NAME, load_settings
from .errors import ChannelError, LoadError
from .runtime import run_app
from .ui_theme import available_theme_names, resolve_theme

logger = logging.getLogger(__name__)

USAGE_ERROR = (
    "No file path provided.\n"
    "Usage: mqtui <FILE>\n"
    "For more information, try '--help'"
)


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _configure_logging(debug: bool) -> None:
    """Configure logging. When debug=True, logs to file at DEBUG level."""
    if not debug:
        # The TUI owns the terminal, so nothing may reach stderr.
        logging.disable(logging.CRITICAL)
        return

    log_dir = Path(user_config_dir(APP_NAME, appauthor=False))
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        log_dir / "debug.log",
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    logging.disable(logging.NOTSET)
    logging.root.addHandler(handler)
    logging.root.setLevel(logging.DEBUG)


def read_text(path: Path) -> str:
    """Read ``path`` trying common encodings before a lossy UTF-8 decode.

    Raises ``LoadError`` when the file cannot be opened.
    """
    try:
        for encoding in ("utf-8", "utf-8-sig", "latin-1"):
            try:
                return path.read_text(encoding=encoding)
            except UnicodeDecodeError:
                continue
        return path.read_bytes().decode("utf-8", errors="replace")
    except OSError as exc:
        reason = exc.strerror or str(exc)
        raise LoadError(f"Failed to read {path}: {reason}") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mqtui",
        description="Query and browse a Markdown document in an interactive terminal UI.",
    )
    parser.add_argument("file", nargs="?", default=None, metavar="FILE", help="Markdown file to open.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--style", default=None, help="Pygments style name for the detail pane.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument(
        "--tick-ms",
        type=_positive_int,
        default=None,
        help="Input poll interval in milliseconds.",
    )
    parser.add_argument("--debug", action="store_true", help="Write debug logs to the config directory.")
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Parse CLI arguments and launch mqtui on a Markdown file.

    Startup failures and a lost input channel end the process through
    ``SystemExit`` carrying a readable message.
    """
    args = build_parser().parse_args(argv)
    _configure_logging(args.debug)

    if args.file is None:
        raise SystemExit(USAGE_ERROR)

    path = Path(args.file)
    try:
        content = read_text(path)
    except LoadError as exc:
        raise SystemExit(str(exc)) from exc

    settings = load_settings()
    theme = resolve_theme(args.theme or settings.theme, no_color=args.no_color)
    style = args.style or settings.style
    tick_ms = args.tick_ms or settings.tick_ms
    logger.info("starting on %s (theme=%s style=%s tick_ms=%d)", path, theme.name, style, tick_ms)

    app = App.with_file(content, path.name)
    try:
        run_app(app, theme=theme, style=style, tick_ms=tick_ms)
    except ChannelError as exc:
        raise SystemExit(f"Error: {exc}") from exc


if __name__ == "__main__":
    main()
