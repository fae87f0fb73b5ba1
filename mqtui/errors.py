"""Error kinds raised across mqtui.

Only ``LoadError`` and ``ChannelError`` are fatal. The others are caught by
the app and surfaced as a transient status message.
"""

from __future__ import annotations


class MqtuiError(Exception):
    """Base class for all mqtui errors."""


class LoadError(MqtuiError):
    """Input file could not be read."""


class ParseError(MqtuiError):
    """Markdown document could not be parsed."""


class QueryError(MqtuiError):
    """Query is malformed or failed during evaluation."""

    def __init__(self, message: str, position: int | None = None) -> None:
        self.message = message
        self.position = position
        if position is not None:
            message = f"{message} at column {position + 1}"
        super().__init__(message)


class ClipboardError(MqtuiError):
    """Clipboard backend is missing or rejected the write."""

    def __init__(self, message: str, *, unavailable: bool = False) -> None:
        super().__init__(message)
        self.unavailable = unavailable


class ChannelError(MqtuiError):
    """Input event channel was disconnected."""


__all__ = [
    "MqtuiError",
    "LoadError",
    "ParseError",
    "QueryError",
    "ClipboardError",
    "ChannelError",
]
