"""Input-layer public API: terminal key decoding and dispatch tables."""

from .key_registry import ENTER_KEYS, RESIZE, KeyComboBinding, KeyComboRegistry, normalize_key
from .reader import ESC_SEQUENCE_TIMEOUT_MS, read_key

__all__ = [
    "read_key",
    "ESC_SEQUENCE_TIMEOUT_MS",
    "ENTER_KEYS",
    "RESIZE",
    "KeyComboBinding",
    "KeyComboRegistry",
    "normalize_key",
]
