"""Tests for the pydantic wire models."""

import sys
import os

import pytest
from pydantic import ValidationError

# Ensure the project root is importable.
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from loopgram.sdk.models import (
    CallbackQuery,
    Chat,
    InlineKeyboardMarkup,
    Message,
    Update,
    User,
)


class TestUserModel:
    def test_required_fields(self) -> None:
        user = User(id=1, is_bot=True, first_name="Bot")
        assert user.username is None

    def test_missing_required_raises(self) -> None:
        with pytest.raises(ValidationError):
            User(id=1, is_bot=True)  # missing first_name


class TestMessageModel:
    def test_from_alias(self) -> None:
        msg = Message.model_validate({
            "message_id": 1,
            "date": 0,
            "chat": {"id": 5, "type": "private"},
            "from": {"id": 9, "is_bot": False, "first_name": "Ann"},
            "text": "hi",
        })
        assert msg.from_field.id == 9
        assert msg.model_dump(by_alias=True, exclude_none=True)["from"]["id"] == 9

    def test_populate_by_name(self) -> None:
        msg = Message(message_id=1, date=0, chat=Chat(id=5, type="group"),
                      from_field=User(id=9, is_bot=False, first_name="Ann"))
        assert msg.from_field.first_name == "Ann"

    def test_unknown_fields_are_ignored(self) -> None:
        msg = Message.model_validate({
            "message_id": 1,
            "date": 0,
            "chat": {"id": 5, "type": "private"},
            "has_protected_content": True,
        })
        assert not hasattr(msg, "has_protected_content")

    def test_nested_reply(self) -> None:
        msg = Message.model_validate({
            "message_id": 2,
            "date": 0,
            "chat": {"id": 5, "type": "private"},
            "reply_to_message": {"message_id": 1, "date": 0, "chat": {"id": 5, "type": "private"}},
        })
        assert msg.reply_to_message.message_id == 1


class TestCallbackQueryModel:
    def test_from_is_required(self) -> None:
        with pytest.raises(ValidationError):
            CallbackQuery.model_validate({"id": "cb", "chat_instance": "ci"})


class TestUpdateModel:
    def test_only_update_id(self) -> None:
        update = Update.model_validate({"update_id": 1})
        assert update.message is None
        assert update.poll is None

    def test_keyboard(self) -> None:
        markup = InlineKeyboardMarkup.model_validate(
            {"inline_keyboard": [[{"text": "Go", "url": "https://example.com"}]]}
        )
        assert markup.inline_keyboard[0][0].url == "https://example.com"
