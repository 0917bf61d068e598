"""Tagged-union message model.

A wire :class:`~loopgram.sdk.models.Message` carries its payload in one of
some thirty optional fields.  :class:`Message` normalises that into an
envelope (:class:`MessageData`) and exactly one :class:`MessageKind`, so the
dispatcher can match once on ``kind.tag`` without re-reading envelope fields
for every branch.
"""

from __future__ import annotations

import dataclasses
import enum
from typing import Any, Callable, Optional

from loopgram.sdk import models
from loopgram.types.text import Text


class MessageTag(str, enum.Enum):
    """Payload kinds a message can carry."""

    TEXT = "text"
    ANIMATION = "animation"
    AUDIO = "audio"
    DOCUMENT = "document"
    PHOTO = "photo"
    STICKER = "sticker"
    VIDEO = "video"
    VIDEO_NOTE = "video_note"
    VOICE = "voice"
    CONTACT = "contact"
    GAME = "game"
    POLL = "poll"
    VENUE = "venue"
    LOCATION = "location"
    NEW_CHAT_MEMBERS = "new_chat_members"
    LEFT_CHAT_MEMBER = "left_chat_member"
    NEW_CHAT_TITLE = "new_chat_title"
    NEW_CHAT_PHOTO = "new_chat_photo"
    CHAT_PHOTO_DELETED = "chat_photo_deleted"
    GROUP_CREATED = "group_created"
    SUPERGROUP_CREATED = "supergroup_created"
    CHANNEL_CREATED = "channel_created"
    MIGRATE_TO = "migrate_to"
    MIGRATE_FROM = "migrate_from"
    PINNED = "pinned"
    INVOICE = "invoice"
    SUCCESSFUL_PAYMENT = "successful_payment"
    CONNECTED_WEBSITE = "connected_website"
    PASSPORT_DATA = "passport_data"
    UNKNOWN = "unknown"


@dataclasses.dataclass(frozen=True)
class MessageKind:
    """The payload of a message.

    ``value`` holds the variant's data (a :class:`Text`, a list of photo
    sizes, a chat id, ...; ``None`` for flag-only service messages).
    ``caption`` is set for captionable media, ``media_group_id`` for photos
    and videos sent as an album.
    """

    tag: MessageTag
    value: Any = None
    caption: Optional[Text] = None
    media_group_id: Optional[str] = None


@dataclasses.dataclass(frozen=True)
class MessageData:
    """Envelope fields shared by every message, whatever its payload."""

    id: int
    date: int
    chat: models.Chat
    from_user: Optional[models.User] = None
    sender_chat: Optional[models.Chat] = None
    edit_date: Optional[int] = None
    reply_to: Optional[Message] = None
    author_signature: Optional[str] = None
    forward_from: Optional[models.User] = None
    forward_from_chat: Optional[models.Chat] = None
    forward_date: Optional[int] = None
    reply_markup: Optional[models.InlineKeyboardMarkup] = None


def _caption(raw: models.Message) -> Text:
    return Text.from_wire(raw.caption, raw.caption_entities)


# Detection order matters: an animation message also carries ``document``
# and a venue also carries ``location``.
_KIND_TABLE: tuple[tuple[str, Callable[[models.Message], MessageKind]], ...] = (
    ("text",
     lambda m: MessageKind(MessageTag.TEXT, Text.from_wire(m.text, m.entities))),
    ("animation",
     lambda m: MessageKind(MessageTag.ANIMATION, m.animation, caption=_caption(m))),
    ("audio",
     lambda m: MessageKind(MessageTag.AUDIO, m.audio, caption=_caption(m))),
    ("document",
     lambda m: MessageKind(MessageTag.DOCUMENT, m.document, caption=_caption(m))),
    ("photo",
     lambda m: MessageKind(MessageTag.PHOTO, list(m.photo), caption=_caption(m),
                           media_group_id=m.media_group_id)),
    ("sticker",
     lambda m: MessageKind(MessageTag.STICKER, m.sticker)),
    ("video",
     lambda m: MessageKind(MessageTag.VIDEO, m.video, caption=_caption(m),
                           media_group_id=m.media_group_id)),
    ("video_note",
     lambda m: MessageKind(MessageTag.VIDEO_NOTE, m.video_note)),
    ("voice",
     lambda m: MessageKind(MessageTag.VOICE, m.voice, caption=_caption(m))),
    ("contact",
     lambda m: MessageKind(MessageTag.CONTACT, m.contact)),
    ("game",
     lambda m: MessageKind(MessageTag.GAME, m.game)),
    ("poll",
     lambda m: MessageKind(MessageTag.POLL, m.poll)),
    ("venue",
     lambda m: MessageKind(MessageTag.VENUE, m.venue)),
    ("location",
     lambda m: MessageKind(MessageTag.LOCATION, m.location)),
    ("new_chat_members",
     lambda m: MessageKind(MessageTag.NEW_CHAT_MEMBERS, list(m.new_chat_members))),
    ("left_chat_member",
     lambda m: MessageKind(MessageTag.LEFT_CHAT_MEMBER, m.left_chat_member)),
    ("new_chat_title",
     lambda m: MessageKind(MessageTag.NEW_CHAT_TITLE, m.new_chat_title)),
    ("new_chat_photo",
     lambda m: MessageKind(MessageTag.NEW_CHAT_PHOTO, list(m.new_chat_photo))),
    ("delete_chat_photo",
     lambda m: MessageKind(MessageTag.CHAT_PHOTO_DELETED)),
    ("group_chat_created",
     lambda m: MessageKind(MessageTag.GROUP_CREATED)),
    ("supergroup_chat_created",
     lambda m: MessageKind(MessageTag.SUPERGROUP_CREATED)),
    ("channel_chat_created",
     lambda m: MessageKind(MessageTag.CHANNEL_CREATED)),
    ("migrate_to_chat_id",
     lambda m: MessageKind(MessageTag.MIGRATE_TO, m.migrate_to_chat_id)),
    ("migrate_from_chat_id",
     lambda m: MessageKind(MessageTag.MIGRATE_FROM, m.migrate_from_chat_id)),
    ("pinned_message",
     lambda m: MessageKind(MessageTag.PINNED, Message.from_wire(m.pinned_message))),
    ("invoice",
     lambda m: MessageKind(MessageTag.INVOICE, m.invoice)),
    ("successful_payment",
     lambda m: MessageKind(MessageTag.SUCCESSFUL_PAYMENT, m.successful_payment)),
    ("connected_website",
     lambda m: MessageKind(MessageTag.CONNECTED_WEBSITE, m.connected_website)),
    ("passport_data",
     lambda m: MessageKind(MessageTag.PASSPORT_DATA, m.passport_data)),
)


def classify(raw: models.Message) -> MessageKind:
    """Return the payload kind of a wire message (UNKNOWN if none matches).

    Flag fields such as ``group_chat_created`` only count when true.
    """
    for field, build in _KIND_TABLE:
        value = getattr(raw, field)
        if value is None or value is False:
            continue
        return build(raw)
    return MessageKind(MessageTag.UNKNOWN)


@dataclasses.dataclass(frozen=True)
class Message:
    """A message: envelope plus exactly one payload kind."""

    data: MessageData
    kind: MessageKind

    @classmethod
    def new(cls, data: MessageData, kind: MessageKind) -> Message:
        """Rebuild a message from the pieces :meth:`split` returned."""
        return cls(data=data, kind=kind)

    def split(self) -> tuple[MessageData, MessageKind]:
        return self.data, self.kind

    @classmethod
    def from_wire(cls, raw: models.Message) -> Message:
        reply_to = raw.reply_to_message
        data = MessageData(
            id=raw.message_id,
            date=raw.date,
            chat=raw.chat,
            from_user=raw.from_field,
            sender_chat=raw.sender_chat,
            edit_date=raw.edit_date,
            reply_to=cls.from_wire(reply_to) if reply_to is not None else None,
            author_signature=raw.author_signature,
            forward_from=raw.forward_from,
            forward_from_chat=raw.forward_from_chat,
            forward_date=raw.forward_date,
            reply_markup=raw.reply_markup,
        )
        return cls(data=data, kind=classify(raw))

    @property
    def id(self) -> int:
        return self.data.id

    @property
    def chat(self) -> models.Chat:
        return self.data.chat
