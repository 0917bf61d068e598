"""Tests for the tagged-union event model built from raw update JSON."""

import sys
import os

import pytest
from pydantic import ValidationError

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from loopgram.types import (
    CallbackTag,
    EntityKind,
    Message,
    MessageTag,
    OriginTag,
    Text,
    Update,
    UpdateTag,
)


# ── Helpers ──────────────────────────────────────────────────────────────────


def _raw_message(**fields: object) -> dict:
    message = {
        "message_id": 1,
        "date": 1700000000,
        "chat": {"id": 100, "type": "private"},
        "from": {"id": 7, "is_bot": False, "first_name": "Ann"},
    }
    message.update(fields)
    return message


def _photo() -> list:
    return [{"file_id": "p1", "file_unique_id": "u1", "width": 90, "height": 90}]


def _message_kind(**fields: object):
    update = Update.from_dict({"update_id": 1, "message": _raw_message(**fields)})
    return update.kind.value.kind


# ── Update ───────────────────────────────────────────────────────────────────


class TestUpdate:
    def test_text_message(self) -> None:
        update = Update.from_dict({
            "update_id": 42,
            "message": _raw_message(
                text="/start hi",
                entities=[{"type": "bot_command", "offset": 0, "length": 6}],
            ),
        })
        assert update.id == 42
        assert update.kind.tag is UpdateTag.MESSAGE
        assert update.kind.is_message

        message = update.kind.value
        assert isinstance(message, Message)
        assert message.id == 1
        assert message.chat.id == 100
        assert message.data.from_user.first_name == "Ann"
        assert message.kind.tag is MessageTag.TEXT
        assert message.kind.value.value == "/start hi"
        assert message.kind.value.entities[0].kind is EntityKind.BOT_COMMAND

    def test_channel_post(self) -> None:
        update = Update.from_dict({"update_id": 1, "channel_post": _raw_message(text="news")})
        assert update.kind.tag is UpdateTag.CHANNEL_POST

    def test_unknown_update(self) -> None:
        update = Update.from_dict({"update_id": 9, "my_chat_member": {"anything": True}})
        assert update.kind.tag is UpdateTag.UNKNOWN
        assert update.kind.value is None
        assert not update.kind.is_message

    def test_query_kinds_keep_wire_model(self) -> None:
        update = Update.from_dict({
            "update_id": 3,
            "inline_query": {
                "id": "q1",
                "from": {"id": 7, "is_bot": False, "first_name": "Ann"},
                "query": "cats",
                "offset": "",
            },
        })
        assert update.kind.tag is UpdateTag.INLINE_QUERY
        assert update.kind.value.query == "cats"
        assert update.kind.value.from_field.id == 7

    def test_missing_update_id_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Update.from_dict({"message": _raw_message(text="hi")})


# ── Message classification ───────────────────────────────────────────────────


class TestMessageKind:
    def test_photo_with_caption_and_album(self) -> None:
        kind = _message_kind(photo=_photo(), caption="look", media_group_id="g1")
        assert kind.tag is MessageTag.PHOTO
        assert kind.value[0].file_id == "p1"
        assert kind.caption == Text("look")
        assert kind.media_group_id == "g1"

    def test_animation_wins_over_document(self) -> None:
        kind = _message_kind(
            animation={"file_id": "a", "file_unique_id": "ua", "width": 1, "height": 1, "duration": 2},
            document={"file_id": "a", "file_unique_id": "ua"},
        )
        assert kind.tag is MessageTag.ANIMATION

    def test_venue_wins_over_location(self) -> None:
        location = {"longitude": 1.5, "latitude": 2.5}
        kind = _message_kind(
            venue={"location": location, "title": "Cafe", "address": "Main St"},
            location=location,
        )
        assert kind.tag is MessageTag.VENUE
        assert kind.value.title == "Cafe"

    def test_flag_service_message(self) -> None:
        assert _message_kind(delete_chat_photo=True).tag is MessageTag.CHAT_PHOTO_DELETED
        assert _message_kind(group_chat_created=True).tag is MessageTag.GROUP_CREATED

    def test_false_flag_is_ignored(self) -> None:
        assert _message_kind(supergroup_chat_created=False).tag is MessageTag.UNKNOWN

    def test_migration(self) -> None:
        assert _message_kind(migrate_to_chat_id=-100123).tag is MessageTag.MIGRATE_TO
        kind = _message_kind(migrate_from_chat_id=-456)
        assert kind.tag is MessageTag.MIGRATE_FROM
        assert kind.value == -456

    def test_connected_website(self) -> None:
        kind = _message_kind(connected_website="example.com")
        assert kind.tag is MessageTag.CONNECTED_WEBSITE
        assert kind.value == "example.com"

    def test_pinned_message_is_normalised(self) -> None:
        kind = _message_kind(pinned_message=_raw_message(message_id=5, text="pinned"))
        assert kind.tag is MessageTag.PINNED
        assert isinstance(kind.value, Message)
        assert kind.value.id == 5

    def test_no_payload_is_unknown(self) -> None:
        assert _message_kind().tag is MessageTag.UNKNOWN


class TestMessageSplit:
    def test_split_and_new_are_inverse(self) -> None:
        update = Update.from_dict({"update_id": 1, "message": _raw_message(text="hello")})
        message = update.kind.value
        data, kind = message.split()
        assert Message.new(data, kind) == message

    def test_envelope_fields(self) -> None:
        update = Update.from_dict({
            "update_id": 1,
            "edited_message": _raw_message(
                text="fixed",
                edit_date=1700000100,
                author_signature="Ann",
                reply_to_message=_raw_message(message_id=0, text="original"),
            ),
        })
        data, _ = update.kind.value.split()
        assert data.edit_date == 1700000100
        assert data.author_signature == "Ann"
        assert data.reply_to.kind.value.value == "original"


# ── Callback queries ─────────────────────────────────────────────────────────


class TestCallbackQuery:
    def _update(self, **fields: object) -> dict:
        query = {
            "id": "cb1",
            "from": {"id": 7, "is_bot": False, "first_name": "Ann"},
            "chat_instance": "ci",
        }
        query.update(fields)
        return {"update_id": 1, "callback_query": query}

    def test_message_origin_with_data(self) -> None:
        update = Update.from_dict(self._update(message=_raw_message(text="menu"), data="yes"))
        query = update.kind.value
        assert query.origin.tag is OriginTag.MESSAGE
        assert query.origin.value.kind.value.value == "menu"
        assert query.kind.tag is CallbackTag.DATA
        assert query.kind.value == "yes"

    def test_inline_origin_with_game(self) -> None:
        update = Update.from_dict(self._update(inline_message_id="im1", game_short_name="chess"))
        query = update.kind.value
        assert query.origin.tag is OriginTag.INLINE
        assert query.origin.value == "im1"
        assert query.kind.tag is CallbackTag.GAME
        assert query.kind.value == "chess"

    def test_missing_origin(self) -> None:
        with pytest.raises(ValueError, match="inline_message_id"):
            Update.from_dict(self._update(data="yes"))

    def test_missing_kind(self) -> None:
        with pytest.raises(ValueError, match="game_short_name"):
            Update.from_dict(self._update(inline_message_id="im1"))


class TestEntityKind:
    def test_unknown_kind_falls_back(self) -> None:
        assert EntityKind.parse("spoiler") is EntityKind.UNKNOWN

    def test_known_kind(self) -> None:
        assert EntityKind.parse("hashtag") is EntityKind.HASHTAG
