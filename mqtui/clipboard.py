"""Best-effort clipboard copy through platform clipboard commands."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys

from .errors import ClipboardError

logger = logging.getLogger(__name__)


def clipboard_commands() -> list[list[str]]:
    """Return candidate clipboard commands for the current platform."""
    if sys.platform == "darwin":
        return [["pbcopy"]]
    if os.name == "nt":
        return [["clip"]]
    return [
        ["wl-copy"],
        ["xclip", "-selection", "clipboard"],
        ["xsel", "--clipboard", "--input"],
    ]


def copy_text_to_clipboard(text: str) -> None:
    """Copy ``text`` with the first clipboard command that succeeds.

    Raises ``ClipboardError`` with ``unavailable=True`` when no command is
    installed and ``unavailable=False`` when every installed one failed.
    """
    attempted = False
    for command in clipboard_commands():
        if shutil.which(command[0]) is None:
            continue
        attempted = True
        try:
            proc = subprocess.run(
                command,
                input=text,
                text=True,
                check=False,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError:
            logger.debug("clipboard command %s failed to start", command[0], exc_info=True)
            continue
        if proc.returncode == 0:
            return
        logger.debug("clipboard command %s exited with %d", command[0], proc.returncode)
    if not attempted:
        raise ClipboardError("no clipboard command available", unavailable=True)
    raise ClipboardError("clipboard write failed")


__all__ = ["clipboard_commands", "copy_text_to_clipboard"]
