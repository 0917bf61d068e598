"""Per-event contexts handed to handlers.

A context is built once per dispatched event and the same instance is passed
to every handler of the category, so all of them are frozen.  Follow-up
operations are coroutines: the blocking :class:`BotClient` call runs in a
worker thread through :func:`asyncio.to_thread`.

Usage::

    @loop.photo
    async def on_photo(ctx: MessageContext) -> None:
        await ctx.send_message_in_reply("Nice picture")
"""

from __future__ import annotations

import asyncio
import dataclasses
from typing import Any, Dict, List, Optional

from loopgram.event_loop.categories import Capability, Category, capabilities
from loopgram.sdk import models
from loopgram.sdk.client import BotClient, ChatId
from loopgram.sdk.exceptions import CapabilityError
from loopgram.types import CallbackQuery, CallbackTag, MessageData, Text, UpdateKind


@dataclasses.dataclass(frozen=True)
class UpdateContext:
    """Passed to before-update and after-update handlers."""

    bot: BotClient
    update_id: int


@dataclasses.dataclass(frozen=True)
class UnhandledContext:
    """Passed to unhandled handlers; ``update_kind`` is the original event."""

    bot: BotClient
    update_id: int
    update_kind: UpdateKind


# ── Messages ─────────────────────────────────────────────────────────────────


@dataclasses.dataclass(frozen=True)
class MessageContext:
    """A message of one category: envelope, payload and allowed follow-ups.

    ``payload`` is the category's value: a :class:`Text` for text and
    command categories (already stripped of the command for the latter),
    the wire model for media, a list for photos and new members, and so on.
    ``command`` is only set for command categories.
    """

    bot: BotClient
    category: Category
    data: MessageData
    payload: Any = None
    caption: Optional[Text] = None
    media_group_id: Optional[str] = None
    edit_date: Optional[int] = None
    command: Optional[str] = None

    @property
    def message_id(self) -> int:
        return self.data.id

    @property
    def chat(self) -> models.Chat:
        return self.data.chat

    @property
    def from_user(self) -> Optional[models.User]:
        return self.data.from_user

    @property
    def date(self) -> int:
        return self.data.date

    @property
    def text(self) -> Optional[Text]:
        """The payload if it is text, else the caption (if any)."""
        if isinstance(self.payload, Text):
            return self.payload
        return self.caption

    @property
    def capabilities(self) -> Capability:
        return capabilities(self.category)

    def _require(self, capability: Capability) -> None:
        if capability not in self.capabilities:
            raise CapabilityError(self.category.value, capability.name or str(capability))

    async def forward_to(self, chat_id: ChatId, disable_notification: Optional[bool] = None) -> models.Message:
        """Forward this message to *chat_id*."""
        self._require(Capability.FORWARD)
        return await asyncio.to_thread(
            self.bot.forward_message, chat_id, self.chat.id, self.message_id, disable_notification,
        )

    async def pin_this_message(self, disable_notification: Optional[bool] = None) -> bool:
        self._require(Capability.PIN)
        return await asyncio.to_thread(
            self.bot.pin_chat_message, self.chat.id, self.message_id, disable_notification,
        )

    async def send_message(self, text: str, **kwargs: Any) -> models.Message:
        """Send *text* to this message's chat; *kwargs* go to :meth:`BotClient.send_message`."""
        self._require(Capability.SEND)
        return await asyncio.to_thread(self.bot.send_message, self.chat.id, text, **kwargs)

    async def send_message_in_reply(self, text: str, **kwargs: Any) -> models.Message:
        self._require(Capability.REPLY)
        return await asyncio.to_thread(
            self.bot.send_message, self.chat.id, text, reply_to_message_id=self.message_id, **kwargs,
        )

    async def delete_this_message(self) -> bool:
        self._require(Capability.DELETE)
        return await asyncio.to_thread(self.bot.delete_message, self.chat.id, self.message_id)


# ── Callback queries ─────────────────────────────────────────────────────────


@dataclasses.dataclass(frozen=True)
class CallbackContext:
    """A pressed inline-keyboard button carrying data or a game short name."""

    bot: BotClient
    category: Category
    query: CallbackQuery

    @property
    def id(self) -> str:
        return self.query.id

    @property
    def from_user(self) -> models.User:
        return self.query.from_user

    @property
    def data(self) -> Optional[str]:
        kind = self.query.kind
        return kind.value if kind.tag is CallbackTag.DATA else None

    @property
    def game_short_name(self) -> Optional[str]:
        kind = self.query.kind
        return kind.value if kind.tag is CallbackTag.GAME else None

    async def answer(
        self,
        text: Optional[str] = None,
        show_alert: Optional[bool] = None,
        url: Optional[str] = None,
        cache_time: Optional[int] = None,
    ) -> bool:
        return await asyncio.to_thread(
            self.bot.answer_callback_query, self.id, text, show_alert, url, cache_time,
        )

    async def notify(self, text: str) -> bool:
        """Show *text* as a toast at the top of the chat."""
        return await self.answer(text=text)

    async def alert(self, text: str) -> bool:
        """Show *text* in a modal alert the user has to dismiss."""
        return await self.answer(text=text, show_alert=True)

    async def open_url(self, url: str) -> bool:
        return await self.answer(url=url)

    async def ignore(self) -> bool:
        """Acknowledge the press without showing anything."""
        return await self.answer()


# ── Other queries ────────────────────────────────────────────────────────────


@dataclasses.dataclass(frozen=True)
class QueryContext:
    """Inline, chosen inline, shipping, pre-checkout, updated poll and poll answer events.

    ``payload`` is the wire model of the query.  Only inline, shipping and
    pre-checkout queries can be answered, each through its own method.
    """

    bot: BotClient
    category: Category
    payload: Any

    @property
    def from_user(self) -> Optional[models.User]:
        if isinstance(self.payload, models.PollAnswer):
            return self.payload.user
        return getattr(self.payload, "from_field", None)

    def _expect(self, category: Category, operation: str) -> None:
        if self.category is not category:
            raise CapabilityError(self.category.value, operation)

    async def answer_inline(self, results: List[Dict[str, Any]], **kwargs: Any) -> bool:
        self._expect(Category.INLINE, "answer_inline")
        return await asyncio.to_thread(self.bot.answer_inline_query, self.payload.id, results, **kwargs)

    async def answer_shipping(
        self,
        ok: bool,
        shipping_options: Optional[List[models.ShippingOption]] = None,
        error_message: Optional[str] = None,
    ) -> bool:
        self._expect(Category.SHIPPING, "answer_shipping")
        return await asyncio.to_thread(
            self.bot.answer_shipping_query, self.payload.id, ok, shipping_options, error_message,
        )

    async def answer_pre_checkout(self, ok: bool, error_message: Optional[str] = None) -> bool:
        self._expect(Category.PRE_CHECKOUT, "answer_pre_checkout")
        return await asyncio.to_thread(
            self.bot.answer_pre_checkout_query, self.payload.id, ok, error_message,
        )
