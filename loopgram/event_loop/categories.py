"""Dispatch categories and the follow-up capabilities each one allows.

Every handler registers against exactly one :class:`Category`.  The tables
at the bottom map payload tags onto categories so the dispatcher can route
with a dictionary lookup instead of one branch per kind.
"""

import enum

from loopgram.types import MessageTag, UpdateTag


class Category(str, enum.Enum):
    """A dispatch bucket; the value doubles as the registration method name."""

    # ── Lifecycle ────────────────────────────────────────────────────────
    BEFORE_UPDATE = "before_update"
    AFTER_UPDATE = "after_update"
    UNHANDLED = "unhandled"

    # ── Commands (keyed further by command name) ─────────────────────────
    COMMAND = "command"
    EDITED_COMMAND = "edited_command"

    # ── Message content ──────────────────────────────────────────────────
    TEXT = "text"
    PHOTO = "photo"
    VIDEO = "video"
    AUDIO = "audio"
    DOCUMENT = "document"
    ANIMATION = "animation"
    VIDEO_NOTE = "video_note"
    VOICE = "voice"
    STICKER = "sticker"
    GAME = "game"
    POLL = "poll"
    CONTACT = "contact"
    LOCATION = "location"
    VENUE = "venue"
    INVOICE = "invoice"

    # ── Service messages ─────────────────────────────────────────────────
    PAYMENT = "payment"
    PASSPORT = "passport"
    PINNED_MESSAGE = "pinned_message"
    NEW_MEMBERS = "new_members"
    LEFT_MEMBER = "left_member"
    NEW_CHAT_PHOTO = "new_chat_photo"
    DELETED_CHAT_PHOTO = "deleted_chat_photo"
    NEW_CHAT_TITLE = "new_chat_title"
    CREATED_GROUP = "created_group"
    MIGRATION = "migration"
    CONNECTED_WEBSITE = "connected_website"

    # ── Edited messages ──────────────────────────────────────────────────
    EDITED_TEXT = "edited_text"
    EDITED_PHOTO = "edited_photo"
    EDITED_VIDEO = "edited_video"
    EDITED_AUDIO = "edited_audio"
    EDITED_DOCUMENT = "edited_document"
    EDITED_ANIMATION = "edited_animation"
    EDITED_LOCATION = "edited_location"

    # ── Callback queries ─────────────────────────────────────────────────
    DATA_CALLBACK = "data_callback"
    GAME_CALLBACK = "game_callback"

    # ── Other queries ────────────────────────────────────────────────────
    INLINE = "inline"
    CHOSEN_INLINE = "chosen_inline"
    SHIPPING = "shipping"
    PRE_CHECKOUT = "pre_checkout"
    UPDATED_POLL = "updated_poll"
    POLL_ANSWER = "poll_answer"


class Capability(enum.Flag):
    """Follow-up actions a message context may perform."""

    NONE = 0
    FORWARD = enum.auto()
    PIN = enum.auto()
    SEND = enum.auto()
    REPLY = enum.auto()
    DELETE = enum.auto()


_CONTENT = Capability.FORWARD | Capability.PIN | Capability.SEND | Capability.REPLY | Capability.DELETE
_SERVICE = Capability.SEND | Capability.DELETE

_CONTENT_CATEGORIES = (
    Category.COMMAND, Category.EDITED_COMMAND,
    Category.TEXT, Category.PHOTO, Category.VIDEO, Category.AUDIO,
    Category.DOCUMENT, Category.ANIMATION, Category.VIDEO_NOTE, Category.VOICE,
    Category.STICKER, Category.GAME, Category.POLL, Category.CONTACT,
    Category.LOCATION, Category.VENUE, Category.INVOICE,
    Category.EDITED_TEXT, Category.EDITED_PHOTO, Category.EDITED_VIDEO,
    Category.EDITED_AUDIO, Category.EDITED_DOCUMENT, Category.EDITED_ANIMATION,
    Category.EDITED_LOCATION,
)

# Service messages cannot be forwarded, pinned or replied to, but the bot
# can still talk in their chat and remove them.
_SERVICE_CATEGORIES = (
    Category.PAYMENT, Category.PASSPORT, Category.PINNED_MESSAGE,
    Category.NEW_MEMBERS, Category.LEFT_MEMBER, Category.NEW_CHAT_PHOTO,
    Category.DELETED_CHAT_PHOTO, Category.NEW_CHAT_TITLE, Category.CREATED_GROUP,
    Category.MIGRATION, Category.CONNECTED_WEBSITE,
)

CAPABILITIES: dict[Category, Capability] = {
    **{category: _CONTENT for category in _CONTENT_CATEGORIES},
    **{category: _SERVICE for category in _SERVICE_CATEGORIES},
}


def capabilities(category: Category) -> Capability:
    """Return the capability set of *category* (``NONE`` for non-message categories)."""
    return CAPABILITIES.get(category, Capability.NONE)


# ── Routing tables ───────────────────────────────────────────────────────────

# TEXT is routed separately (commands); MIGRATE_TO, SUPERGROUP_CREATED,
# CHANNEL_CREATED and UNKNOWN have no category.
MESSAGE_CATEGORIES: dict[MessageTag, Category] = {
    MessageTag.PHOTO: Category.PHOTO,
    MessageTag.VIDEO: Category.VIDEO,
    MessageTag.AUDIO: Category.AUDIO,
    MessageTag.DOCUMENT: Category.DOCUMENT,
    MessageTag.ANIMATION: Category.ANIMATION,
    MessageTag.VIDEO_NOTE: Category.VIDEO_NOTE,
    MessageTag.VOICE: Category.VOICE,
    MessageTag.STICKER: Category.STICKER,
    MessageTag.GAME: Category.GAME,
    MessageTag.POLL: Category.POLL,
    MessageTag.CONTACT: Category.CONTACT,
    MessageTag.LOCATION: Category.LOCATION,
    MessageTag.VENUE: Category.VENUE,
    MessageTag.INVOICE: Category.INVOICE,
    MessageTag.SUCCESSFUL_PAYMENT: Category.PAYMENT,
    MessageTag.PASSPORT_DATA: Category.PASSPORT,
    MessageTag.PINNED: Category.PINNED_MESSAGE,
    MessageTag.NEW_CHAT_MEMBERS: Category.NEW_MEMBERS,
    MessageTag.LEFT_CHAT_MEMBER: Category.LEFT_MEMBER,
    MessageTag.NEW_CHAT_PHOTO: Category.NEW_CHAT_PHOTO,
    MessageTag.CHAT_PHOTO_DELETED: Category.DELETED_CHAT_PHOTO,
    MessageTag.NEW_CHAT_TITLE: Category.NEW_CHAT_TITLE,
    MessageTag.GROUP_CREATED: Category.CREATED_GROUP,
    MessageTag.MIGRATE_FROM: Category.MIGRATION,
    MessageTag.CONNECTED_WEBSITE: Category.CONNECTED_WEBSITE,
}

# Only these kinds can be edited; TEXT is again routed separately.
EDITED_CATEGORIES: dict[MessageTag, Category] = {
    MessageTag.PHOTO: Category.EDITED_PHOTO,
    MessageTag.VIDEO: Category.EDITED_VIDEO,
    MessageTag.AUDIO: Category.EDITED_AUDIO,
    MessageTag.DOCUMENT: Category.EDITED_DOCUMENT,
    MessageTag.ANIMATION: Category.EDITED_ANIMATION,
    MessageTag.LOCATION: Category.EDITED_LOCATION,
}

QUERY_CATEGORIES: dict[UpdateTag, Category] = {
    UpdateTag.INLINE_QUERY: Category.INLINE,
    UpdateTag.CHOSEN_INLINE_RESULT: Category.CHOSEN_INLINE,
    UpdateTag.SHIPPING_QUERY: Category.SHIPPING,
    UpdateTag.PRE_CHECKOUT_QUERY: Category.PRE_CHECKOUT,
    UpdateTag.POLL: Category.UPDATED_POLL,
    UpdateTag.POLL_ANSWER: Category.POLL_ANSWER,
}
