"""Input-layer public API: byte reading and modal key decoding.

Low-level terminal reads live in ``reader``; ``decoder`` turns bytes into
``Action`` values for the runtime controller.
"""

from .actions import Action, ActionKind, Mode
from .decoder import (
    ESC_SEQUENCE_TIMEOUT_MS,
    LEADER_TIMEOUT_MS,
    POLL_TIMEOUT_MS,
    ByteSource,
    decode_action,
)
from .reader import ByteReader

__all__ = [
    "Action",
    "ActionKind",
    "Mode",
    "ByteReader",
    "ByteSource",
    "decode_action",
    "ESC_SEQUENCE_TIMEOUT_MS",
    "LEADER_TIMEOUT_MS",
    "POLL_TIMEOUT_MS",
]
