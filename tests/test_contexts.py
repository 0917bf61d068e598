"""Tests for context follow-up operations and capability gating."""

import sys
import os
from unittest.mock import MagicMock

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from loopgram.event_loop import (
    CallbackContext,
    Capability,
    Category,
    MessageContext,
    QueryContext,
    capabilities,
)
from loopgram.event_loop.categories import MESSAGE_CATEGORIES, QUERY_CATEGORIES
from loopgram.sdk import models
from loopgram.sdk.exceptions import CapabilityError
from loopgram.types import (
    CallbackKind,
    CallbackOrigin,
    CallbackQuery,
    CallbackTag,
    MessageData,
    OriginTag,
    Text,
)


# ── Helpers ──────────────────────────────────────────────────────────────────

_USER = models.User(id=7, is_bot=False, first_name="Ann")


def _data() -> MessageData:
    return MessageData(id=55, date=1700000000, chat=models.Chat(id=100, type="group"), from_user=_USER)


def _message_context(category: Category, bot: MagicMock, payload: object = None) -> MessageContext:
    return MessageContext(bot, category, _data(), payload=payload)


def _callback_context(bot: MagicMock) -> CallbackContext:
    query = CallbackQuery(
        id="cb1",
        from_user=_USER,
        origin=CallbackOrigin(OriginTag.INLINE, "im1"),
        chat_instance="ci",
        kind=CallbackKind(CallbackTag.DATA, "yes"),
    )
    return CallbackContext(bot, Category.DATA_CALLBACK, query)


# ── Capability table ─────────────────────────────────────────────────────────


class TestCapabilities:
    def test_content_categories_allow_everything(self) -> None:
        for category in (Category.TEXT, Category.PHOTO, Category.COMMAND, Category.EDITED_VIDEO):
            caps = capabilities(category)
            for capability in (Capability.FORWARD, Capability.PIN, Capability.SEND,
                               Capability.REPLY, Capability.DELETE):
                assert capability in caps

    def test_service_categories_only_send_and_delete(self) -> None:
        for category in (Category.NEW_MEMBERS, Category.MIGRATION, Category.PINNED_MESSAGE):
            assert capabilities(category) == Capability.SEND | Capability.DELETE

    def test_every_message_category_has_capabilities(self) -> None:
        for category in MESSAGE_CATEGORIES.values():
            assert capabilities(category) != Capability.NONE

    def test_query_categories_have_none(self) -> None:
        for category in QUERY_CATEGORIES.values():
            assert capabilities(category) == Capability.NONE


# ── MessageContext ───────────────────────────────────────────────────────────


class TestMessageContext:
    def test_envelope_properties(self) -> None:
        ctx = _message_context(Category.TEXT, MagicMock(), payload=Text("hi"))
        assert ctx.message_id == 55
        assert ctx.chat.id == 100
        assert ctx.from_user.first_name == "Ann"
        assert ctx.date == 1700000000
        assert ctx.text == Text("hi")

    def test_caption_is_text_for_media(self) -> None:
        ctx = MessageContext(MagicMock(), Category.PHOTO, _data(), payload=[], caption=Text("cap"))
        assert ctx.text == Text("cap")

    def test_context_is_frozen(self) -> None:
        ctx = _message_context(Category.TEXT, MagicMock())
        with pytest.raises(AttributeError):
            ctx.command = "x"  # type: ignore[misc]

    @pytest.mark.asyncio
    async def test_forward_to(self) -> None:
        bot = MagicMock()
        ctx = _message_context(Category.PHOTO, bot)

        await ctx.forward_to(999)

        bot.forward_message.assert_called_once_with(999, 100, 55, None)

    @pytest.mark.asyncio
    async def test_pin_this_message(self) -> None:
        bot = MagicMock()
        bot.pin_chat_message.return_value = True
        ctx = _message_context(Category.TEXT, bot)

        assert await ctx.pin_this_message() is True
        bot.pin_chat_message.assert_called_once_with(100, 55, None)

    @pytest.mark.asyncio
    async def test_send_message_in_reply(self) -> None:
        bot = MagicMock()
        ctx = _message_context(Category.TEXT, bot)

        await ctx.send_message_in_reply("pong", parse_mode="HTML")

        bot.send_message.assert_called_once_with(100, "pong", reply_to_message_id=55, parse_mode="HTML")

    @pytest.mark.asyncio
    async def test_service_message_can_send_and_delete(self) -> None:
        bot = MagicMock()
        ctx = _message_context(Category.NEW_MEMBERS, bot, payload=[_USER])

        await ctx.send_message("Welcome!")
        await ctx.delete_this_message()

        bot.send_message.assert_called_once_with(100, "Welcome!")
        bot.delete_message.assert_called_once_with(100, 55)

    @pytest.mark.asyncio
    async def test_service_message_cannot_be_forwarded(self) -> None:
        bot = MagicMock()
        ctx = _message_context(Category.NEW_MEMBERS, bot)

        with pytest.raises(CapabilityError) as exc_info:
            await ctx.forward_to(999)

        assert exc_info.value.category == "new_members"
        assert exc_info.value.capability == "FORWARD"
        bot.forward_message.assert_not_called()

    @pytest.mark.asyncio
    async def test_service_message_cannot_be_pinned_or_replied_to(self) -> None:
        ctx = _message_context(Category.LEFT_MEMBER, MagicMock())

        with pytest.raises(CapabilityError):
            await ctx.pin_this_message()
        with pytest.raises(CapabilityError):
            await ctx.send_message_in_reply("bye")


# ── CallbackContext ──────────────────────────────────────────────────────────


class TestCallbackContext:
    @pytest.mark.asyncio
    async def test_notify(self) -> None:
        bot = MagicMock()
        await _callback_context(bot).notify("saved")
        bot.answer_callback_query.assert_called_once_with("cb1", "saved", None, None, None)

    @pytest.mark.asyncio
    async def test_alert(self) -> None:
        bot = MagicMock()
        await _callback_context(bot).alert("careful")
        bot.answer_callback_query.assert_called_once_with("cb1", "careful", True, None, None)

    @pytest.mark.asyncio
    async def test_open_url(self) -> None:
        bot = MagicMock()
        await _callback_context(bot).open_url("https://t.me/mybot?start=x")
        bot.answer_callback_query.assert_called_once_with(
            "cb1", None, None, "https://t.me/mybot?start=x", None,
        )

    @pytest.mark.asyncio
    async def test_ignore(self) -> None:
        bot = MagicMock()
        await _callback_context(bot).ignore()
        bot.answer_callback_query.assert_called_once_with("cb1", None, None, None, None)

    def test_properties(self) -> None:
        ctx = _callback_context(MagicMock())
        assert ctx.id == "cb1"
        assert ctx.from_user.id == 7
        assert ctx.data == "yes"
        assert ctx.game_short_name is None


# ── QueryContext ─────────────────────────────────────────────────────────────


class TestQueryContext:
    def _inline(self) -> models.InlineQuery:
        return models.InlineQuery(id="q1", from_field=_USER, query="cats", offset="")

    @pytest.mark.asyncio
    async def test_answer_inline(self) -> None:
        bot = MagicMock()
        ctx = QueryContext(bot, Category.INLINE, self._inline())
        results = [{"type": "article", "id": "1", "title": "Cat"}]

        await ctx.answer_inline(results, cache_time=0)

        bot.answer_inline_query.assert_called_once_with("q1", results, cache_time=0)

    @pytest.mark.asyncio
    async def test_answer_pre_checkout(self) -> None:
        bot = MagicMock()
        query = models.PreCheckoutQuery(
            id="pc1", from_field=_USER, currency="EUR", total_amount=500, invoice_payload="order-1",
        )
        ctx = QueryContext(bot, Category.PRE_CHECKOUT, query)

        await ctx.answer_pre_checkout(True)

        bot.answer_pre_checkout_query.assert_called_once_with("pc1", True, None)

    @pytest.mark.asyncio
    async def test_wrong_answer_for_category(self) -> None:
        ctx = QueryContext(MagicMock(), Category.INLINE, self._inline())

        with pytest.raises(CapabilityError):
            await ctx.answer_shipping(False, error_message="no")

    def test_poll_answer_user(self) -> None:
        answer = models.PollAnswer(poll_id="p", user=_USER, option_ids=[0])
        ctx = QueryContext(MagicMock(), Category.POLL_ANSWER, answer)
        assert ctx.from_user.id == 7
