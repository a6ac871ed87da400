"""Input-layer public API for key decoding and key-to-intent mapping.

Low-level terminal decoding (``read_key``) is kept apart from the
mode-aware binding table used by the runtime loop.
"""

from .keymap import KEY_BINDINGS, KeyBinding, KeyMapper
from .reader import ESC_SEQUENCE_TIMEOUT_MS, read_key

__all__ = [
    "ESC_SEQUENCE_TIMEOUT_MS",
    "KEY_BINDINGS",
    "KeyBinding",
    "KeyMapper",
    "read_key",
]
