"""Key-combo dispatch tables used by each interaction mode."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

ENTER_KEYS = frozenset({"ENTER", "ENTER_CR", "ENTER_LF"})

# Synthetic token posted when the terminal size changes.
RESIZE = "RESIZE"


def normalize_key(key: str) -> str:
    """Fold terminal-specific Enter tokens into ``"ENTER"``."""
    if key in ENTER_KEYS:
        return "ENTER"
    return key


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more key tokens to a single action callback."""

    combos: tuple[str, ...]
    handler: Callable[[], None]


class KeyComboRegistry:
    """Token to handler table with an optional key normalizer."""

    def __init__(self, normalize: Callable[[str], str] | None = normalize_key) -> None:
        self._normalize = normalize if normalize is not None else (lambda key: key)
        self._handlers: dict[str, Callable[[], None]] = {}

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        """Register one binding, overwriting existing handlers for same combos."""
        for combo in binding.combos:
            self._handlers[self._normalize(combo)] = binding.handler
        return self

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        for binding in bindings:
            self.register_binding(binding)
        return self

    def __contains__(self, key: str) -> bool:
        return self._normalize(key) in self._handlers

    def dispatch(self, key: str) -> bool:
        """Invoke the handler bound to ``key``; return whether one existed."""
        handler = self._handlers.get(self._normalize(key))
        if handler is None:
            return False
        handler()
        return True


__all__ = ["ENTER_KEYS", "RESIZE", "KeyComboBinding", "KeyComboRegistry", "normalize_key"]
