"""Callback queries, normalised into origin and kind unions."""

from __future__ import annotations

import dataclasses
import enum
from typing import Union

from loopgram.sdk import models
from loopgram.types.message import Message


class OriginTag(str, enum.Enum):
    MESSAGE = "message"
    INLINE = "inline"


@dataclasses.dataclass(frozen=True)
class CallbackOrigin:
    """Where the pressed button lives.

    ``value`` is the :class:`Message` the keyboard was attached to, or the
    inline message id string for buttons under inline results.
    """

    tag: OriginTag
    value: Union[Message, str]


class CallbackTag(str, enum.Enum):
    DATA = "data"
    GAME = "game"


@dataclasses.dataclass(frozen=True)
class CallbackKind:
    """What the button carried: callback data or a game short name."""

    tag: CallbackTag
    value: str


@dataclasses.dataclass(frozen=True)
class CallbackQuery:
    id: str
    from_user: models.User
    origin: CallbackOrigin
    chat_instance: str
    kind: CallbackKind

    @classmethod
    def from_wire(cls, raw: models.CallbackQuery) -> CallbackQuery:
        """Decide origin and kind by which fields are present.

        Raises:
            ValueError: If neither ``message`` nor ``inline_message_id``, or
                neither ``data`` nor ``game_short_name`` is present.
        """
        if raw.message is not None:
            origin = CallbackOrigin(OriginTag.MESSAGE, Message.from_wire(raw.message))
        elif raw.inline_message_id is not None:
            origin = CallbackOrigin(OriginTag.INLINE, raw.inline_message_id)
        else:
            raise ValueError(
                "Neither `message` nor `inline_message_id` was present on callback query"
            )

        if raw.data is not None:
            kind = CallbackKind(CallbackTag.DATA, raw.data)
        elif raw.game_short_name is not None:
            kind = CallbackKind(CallbackTag.GAME, raw.game_short_name)
        else:
            raise ValueError(
                "Neither `data` nor `game_short_name` was present on callback query"
            )

        return cls(
            id=raw.id,
            from_user=raw.from_field,
            origin=origin,
            chat_instance=raw.chat_instance,
            kind=kind,
        )
