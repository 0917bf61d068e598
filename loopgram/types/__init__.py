"""Tagged-union event model built from the wire models in :mod:`loopgram.sdk.models`.

This package may import from ``loopgram.sdk.models`` only.
"""

from loopgram.types.callback import (
    CallbackKind,
    CallbackOrigin,
    CallbackQuery,
    CallbackTag,
    OriginTag,
)
from loopgram.types.message import Message, MessageData, MessageKind, MessageTag
from loopgram.types.text import Entity, EntityKind, Text
from loopgram.types.update import Update, UpdateKind, UpdateTag

__all__ = [
    # Text
    "Entity",
    "EntityKind",
    "Text",
    # Messages
    "Message",
    "MessageData",
    "MessageKind",
    "MessageTag",
    # Callbacks
    "CallbackKind",
    "CallbackOrigin",
    "CallbackQuery",
    "CallbackTag",
    "OriginTag",
    # Updates
    "Update",
    "UpdateKind",
    "UpdateTag",
]
