"""The root inbound event."""

from __future__ import annotations

import dataclasses
import enum
from typing import Any

from loopgram.sdk import models
from loopgram.types.callback import CallbackQuery
from loopgram.types.message import Message


class UpdateTag(str, enum.Enum):
    MESSAGE = "message"
    CHANNEL_POST = "channel_post"
    EDITED_MESSAGE = "edited_message"
    EDITED_CHANNEL_POST = "edited_channel_post"
    CALLBACK_QUERY = "callback_query"
    INLINE_QUERY = "inline_query"
    CHOSEN_INLINE_RESULT = "chosen_inline_result"
    SHIPPING_QUERY = "shipping_query"
    PRE_CHECKOUT_QUERY = "pre_checkout_query"
    POLL = "poll"
    POLL_ANSWER = "poll_answer"
    UNKNOWN = "unknown"


_MESSAGE_TAGS = frozenset({
    UpdateTag.MESSAGE,
    UpdateTag.CHANNEL_POST,
    UpdateTag.EDITED_MESSAGE,
    UpdateTag.EDITED_CHANNEL_POST,
})


@dataclasses.dataclass(frozen=True)
class UpdateKind:
    """The single payload of an update.

    ``value`` is a :class:`Message` for the four message tags, a
    :class:`CallbackQuery` for callback queries, the wire model for the other
    query kinds, and ``None`` for :attr:`UpdateTag.UNKNOWN`.
    """

    tag: UpdateTag
    value: Any = None

    @property
    def is_message(self) -> bool:
        return self.tag in _MESSAGE_TAGS


@dataclasses.dataclass(frozen=True)
class Update:
    """An update: sequence id plus exactly one kind."""

    id: int
    kind: UpdateKind

    @classmethod
    def from_wire(cls, raw: models.Update) -> Update:
        """Normalise a validated wire update.

        The first present payload field wins; updates carrying none of the
        modelled fields (new API additions) become UNKNOWN.

        Raises:
            ValueError: If a callback query has neither origin or neither kind.
        """
        for tag in UpdateTag:
            if tag is UpdateTag.UNKNOWN:
                continue
            value = getattr(raw, tag.value)
            if value is None:
                continue
            if tag in _MESSAGE_TAGS:
                value = Message.from_wire(value)
            elif tag is UpdateTag.CALLBACK_QUERY:
                value = CallbackQuery.from_wire(value)
            return cls(id=raw.update_id, kind=UpdateKind(tag, value))
        return cls(id=raw.update_id, kind=UpdateKind(UpdateTag.UNKNOWN))

    @classmethod
    def from_dict(cls, raw: dict) -> Update:
        """Validate raw JSON and normalise it.

        Raises:
            pydantic.ValidationError: If *raw* does not match the wire schema.
            ValueError: See :meth:`from_wire`.
        """
        return cls.from_wire(models.Update.model_validate(raw))
