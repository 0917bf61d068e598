"""EventLoop: routes each update to the handlers registered for its category.

For every update the loop runs the before-update handlers, picks exactly one
category (or the unhandled fallback, or nothing), then runs the after-update
handlers.  Handlers are registered with one method per category, each usable
as a decorator::

    loop = EventLoop(BotClient.from_config(), username="mybot")

    @loop.start
    async def on_start(ctx: MessageContext) -> None:
        await ctx.send_message("Hello!")

    @loop.unhandled
    def on_anything_else(ctx: UnhandledContext) -> None:
        print(ctx.update_kind.tag)

    loop.feed(raw_update_json)

Receiving updates (long polling or a webhook server) is the host's job.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Iterable, Optional, Union

import requests
from pydantic import ValidationError

from loopgram import config
from loopgram.core.commands import is_command, parse_command, trim_command
from loopgram.core.identity import is_for_this_bot
from loopgram.core.logger import LoopgramLogger
from loopgram.event_loop.categories import (
    EDITED_CATEGORIES,
    MESSAGE_CATEGORIES,
    QUERY_CATEGORIES,
    Category,
)
from loopgram.event_loop.contexts import (
    CallbackContext,
    MessageContext,
    QueryContext,
    UnhandledContext,
    UpdateContext,
)
from loopgram.event_loop.registry import Handler, HandlerRegistry
from loopgram.sdk.client import BotClient
from loopgram.sdk.exceptions import MissingUsernameError, NetworkError
from loopgram.types import (
    CallbackQuery,
    CallbackTag,
    Message,
    MessageData,
    MessageKind,
    MessageTag,
    Text,
    Update,
    UpdateKind,
    UpdateTag,
)

logger = LoopgramLogger.get_logger()

Names = Union[str, Iterable[str]]


def _registrar(category: Category) -> Callable[..., Handler]:
    def register(self: EventLoop, handler: Handler) -> Handler:
        self._registry.register(category, handler)
        return handler

    register.__name__ = category.value
    register.__doc__ = f"Register *handler* for ``{category.value}`` events; usable as a decorator."
    return register


def _as_names(names: Names) -> list[str]:
    return [names] if isinstance(names, str) else list(names)


class EventLoop:
    """Update dispatcher bound to one :class:`BotClient`."""

    def __init__(self, bot: BotClient, username: Optional[str] = None) -> None:
        self.bot = bot
        self.username = username
        self._registry = HandlerRegistry()
        logger.debug("Event loop created", extra={"username": username})

    @classmethod
    def from_config(cls) -> EventLoop:
        """Build a loop from ``BOT_TOKEN``, ``BOT_USERNAME`` and friends."""
        return cls(BotClient.from_config(), username=config.BOT_USERNAME)

    # ── identity ─────────────────────────────────────────────────────────

    def set_username(self, username: str) -> None:
        """Set the name commands like ``/start@name`` must carry to be ours."""
        self.username = username
        logger.info("Bot username set", extra={"username": username})

    async def fetch_username(self) -> str:
        """Ask ``getMe`` for the bot's username and store it.

        Raises:
            NetworkError: The request did not reach the API.
            APIException: The API answered with an error.
            MissingUsernameError: The reply carried no user, or one without
                a username.
        """
        try:
            me = await asyncio.to_thread(self.bot.get_me)
        except requests.RequestException as exc:
            logger.error("getMe request failed", extra={"api_endpoint": "getMe", "error": str(exc)})
            raise NetworkError(str(exc)) from exc
        except ValidationError as exc:
            logger.error("Malformed getMe reply", extra={"api_endpoint": "getMe", "error": str(exc)})
            raise MissingUsernameError("getMe returned no usable user") from exc

        if not me.username:
            raise MissingUsernameError(f"getMe returned user {me.id} without a username")

        self.set_username(me.username)
        return me.username

    # ── registration ─────────────────────────────────────────────────────

    def on(self, category: Category, handler: Optional[Handler] = None) -> Any:
        """Register *handler* for *category*; without a handler, return a decorator."""
        if category in (Category.COMMAND, Category.EDITED_COMMAND):
            raise ValueError(f"use {category.value}() to register command handlers")

        def decorator(func: Handler) -> Handler:
            self._registry.register(category, func)
            return func

        return decorator if handler is None else decorator(handler)

    def command(self, names: Names, handler: Optional[Handler] = None) -> Any:
        """Register *handler* for one command name or several.

        Usable directly or as ``@loop.command("start")``.
        """
        def decorator(func: Handler) -> Handler:
            for name in _as_names(names):
                self._registry.register_command(name, func)
            return func

        return decorator if handler is None else decorator(handler)

    def commands(self, names: Iterable[str], handler: Optional[Handler] = None) -> Any:
        return self.command(list(names), handler)

    def edited_command(self, names: Names, handler: Optional[Handler] = None) -> Any:
        """Like :meth:`command`, for commands in edited messages."""
        def decorator(func: Handler) -> Handler:
            for name in _as_names(names):
                self._registry.register_edited_command(name, func)
            return func

        return decorator if handler is None else decorator(handler)

    def edited_commands(self, names: Iterable[str], handler: Optional[Handler] = None) -> Any:
        return self.edited_command(list(names), handler)

    def start(self, handler: Handler) -> Handler:
        """Register a ``/start`` handler."""
        return self.command("start", handler)

    def help(self, handler: Handler) -> Handler:
        """Register a ``/help`` handler."""
        return self.command("help", handler)

    def settings(self, handler: Handler) -> Handler:
        """Register a ``/settings`` handler."""
        return self.command("settings", handler)

    before_update = _registrar(Category.BEFORE_UPDATE)
    after_update = _registrar(Category.AFTER_UPDATE)
    unhandled = _registrar(Category.UNHANDLED)

    text = _registrar(Category.TEXT)
    photo = _registrar(Category.PHOTO)
    video = _registrar(Category.VIDEO)
    audio = _registrar(Category.AUDIO)
    document = _registrar(Category.DOCUMENT)
    animation = _registrar(Category.ANIMATION)
    video_note = _registrar(Category.VIDEO_NOTE)
    voice = _registrar(Category.VOICE)
    sticker = _registrar(Category.STICKER)
    game = _registrar(Category.GAME)
    poll = _registrar(Category.POLL)
    contact = _registrar(Category.CONTACT)
    location = _registrar(Category.LOCATION)
    venue = _registrar(Category.VENUE)
    invoice = _registrar(Category.INVOICE)

    payment = _registrar(Category.PAYMENT)
    passport = _registrar(Category.PASSPORT)
    pinned_message = _registrar(Category.PINNED_MESSAGE)
    new_members = _registrar(Category.NEW_MEMBERS)
    left_member = _registrar(Category.LEFT_MEMBER)
    new_chat_photo = _registrar(Category.NEW_CHAT_PHOTO)
    deleted_chat_photo = _registrar(Category.DELETED_CHAT_PHOTO)
    new_chat_title = _registrar(Category.NEW_CHAT_TITLE)
    created_group = _registrar(Category.CREATED_GROUP)
    migration = _registrar(Category.MIGRATION)
    connected_website = _registrar(Category.CONNECTED_WEBSITE)

    edited_text = _registrar(Category.EDITED_TEXT)
    edited_photo = _registrar(Category.EDITED_PHOTO)
    edited_video = _registrar(Category.EDITED_VIDEO)
    edited_audio = _registrar(Category.EDITED_AUDIO)
    edited_document = _registrar(Category.EDITED_DOCUMENT)
    edited_animation = _registrar(Category.EDITED_ANIMATION)
    edited_location = _registrar(Category.EDITED_LOCATION)

    data_callback = _registrar(Category.DATA_CALLBACK)
    game_callback = _registrar(Category.GAME_CALLBACK)

    inline = _registrar(Category.INLINE)
    chosen_inline = _registrar(Category.CHOSEN_INLINE)
    shipping = _registrar(Category.SHIPPING)
    pre_checkout = _registrar(Category.PRE_CHECKOUT)
    updated_poll = _registrar(Category.UPDATED_POLL)
    poll_answer = _registrar(Category.POLL_ANSWER)

    # ── input ────────────────────────────────────────────────────────────

    def feed(self, raw: dict) -> None:
        """Validate one raw update (as decoded from JSON) and dispatch it.

        Updates that fail validation are logged and skipped.
        """
        try:
            update = Update.from_dict(raw)
        except ValueError as exc:
            logger.warning(
                "Failed to parse update, skipping",
                extra={"update_id": raw.get("update_id") if isinstance(raw, dict) else None, "error": str(exc)},
            )
            return
        self.handle_update(update)

    def handle_update(self, update: Update) -> None:
        """Dispatch *update*; returns once every matching handler was called or launched."""
        context = UpdateContext(self.bot, update.id)
        self._registry.run(Category.BEFORE_UPDATE, context)
        try:
            self._dispatch(update)
        finally:
            self._registry.run(Category.AFTER_UPDATE, context)

    async def join(self) -> None:
        """Wait for every coroutine handler launched so far to finish."""
        await self._registry.join()

    # ── routing ──────────────────────────────────────────────────────────

    def _dispatch(self, update: Update) -> None:
        tag = update.kind.tag
        logger.debug("Dispatching update", extra={"update_id": update.id, "update_kind": tag.value})

        if tag is UpdateTag.CALLBACK_QUERY:
            self._handle_callback(update, update.kind.value)
        elif tag in QUERY_CATEGORIES:
            category = QUERY_CATEGORIES[tag]
            if self._registry.will_handle(category):
                self._registry.run(category, QueryContext(self.bot, category, update.kind.value))
            else:
                self._run_unhandled(update, update.kind)
        elif tag in (UpdateTag.MESSAGE, UpdateTag.CHANNEL_POST):
            self._handle_message(update, update.kind.value)
        elif tag in (UpdateTag.EDITED_MESSAGE, UpdateTag.EDITED_CHANNEL_POST):
            self._handle_edit(update, update.kind.value)
        else:
            self._run_unhandled(update, update.kind)

    def _run_unhandled(self, update: Update, kind: UpdateKind) -> None:
        if self._registry.will_handle(Category.UNHANDLED):
            self._registry.run(Category.UNHANDLED, UnhandledContext(self.bot, update.id, kind))
        else:
            logger.debug("No handler for update, discarding", extra={"update_id": update.id})

    def _rewrap_unhandled(self, update: Update, data: MessageData, kind: MessageKind) -> None:
        self._run_unhandled(update, UpdateKind(update.kind.tag, Message.new(data, kind)))

    def _handle_callback(self, update: Update, query: CallbackQuery) -> None:
        tag = query.kind.tag
        if tag is CallbackTag.DATA and self._registry.will_handle(Category.DATA_CALLBACK):
            self._registry.run(Category.DATA_CALLBACK, CallbackContext(self.bot, Category.DATA_CALLBACK, query))
        elif tag is CallbackTag.GAME and self._registry.will_handle(Category.GAME_CALLBACK):
            self._registry.run(Category.GAME_CALLBACK, CallbackContext(self.bot, Category.GAME_CALLBACK, query))
        else:
            self._run_unhandled(update, update.kind)

    def _handle_message(self, update: Update, message: Message) -> None:
        data, kind = message.split()
        tag = kind.tag

        if tag is MessageTag.TEXT:
            if is_command(kind.value):
                self._handle_command(update, data, kind, edited=False)
                return
            category = Category.TEXT
        elif tag is MessageTag.MIGRATE_TO:
            logger.debug("Ignoring migrate_to message", extra={"update_id": update.id, "chat_id": data.chat.id})
            return
        elif tag in (MessageTag.SUPERGROUP_CREATED, MessageTag.CHANNEL_CREATED):
            logger.warning(
                "Bots cannot observe supergroup or channel creation; dropping update",
                extra={"update_id": update.id, "message_kind": tag.value},
            )
            return
        elif tag is MessageTag.UNKNOWN:
            self._rewrap_unhandled(update, data, kind)
            return
        else:
            category = MESSAGE_CATEGORIES[tag]

        self._run_message(update, category, data, kind)

    def _handle_edit(self, update: Update, message: Message) -> None:
        data, kind = message.split()
        tag = kind.tag

        if data.edit_date is None:
            logger.error(
                "Edited message without edit_date; dropping update",
                extra={"update_id": update.id, "message_id": data.id},
            )
            return

        if tag is MessageTag.TEXT:
            if is_command(kind.value):
                self._handle_command(update, data, kind, edited=True)
                return
            category = Category.EDITED_TEXT
        elif tag in EDITED_CATEGORIES:
            category = EDITED_CATEGORIES[tag]
        elif tag is MessageTag.UNKNOWN:
            self._rewrap_unhandled(update, data, kind)
            return
        else:
            logger.error(
                "Unexpected message kind on an edited update; dropping update",
                extra={"update_id": update.id, "message_kind": tag.value},
            )
            return

        self._run_message(update, category, data, kind)

    def _handle_command(self, update: Update, data: MessageData, kind: MessageKind, edited: bool) -> None:
        text: Text = kind.value
        name, username = parse_command(text)

        if not is_for_this_bot(username, self.username):
            logger.debug(
                "Command addressed to another bot, ignoring",
                extra={"update_id": update.id, "command": name, "explicit_username": username},
            )
            return

        if edited:
            category, found = Category.EDITED_COMMAND, self._registry.contains_edited_command(name)
        else:
            category, found = Category.COMMAND, self._registry.contains_command(name)

        if not found:
            self._rewrap_unhandled(update, data, kind)
            return

        context = MessageContext(
            self.bot,
            category,
            data,
            payload=trim_command(text),
            edit_date=data.edit_date,
            command=name,
        )
        logger.debug("Running command", extra={"update_id": update.id, "command": name, "edited": edited})
        if edited:
            self._registry.run_edited_command(name, context)
        else:
            self._registry.run_command(name, context)

    def _run_message(self, update: Update, category: Category, data: MessageData, kind: MessageKind) -> None:
        if not self._registry.will_handle(category):
            self._rewrap_unhandled(update, data, kind)
            return

        context = MessageContext(
            self.bot,
            category,
            data,
            payload=kind.value,
            caption=kind.caption,
            media_group_id=kind.media_group_id,
            edit_date=data.edit_date,
        )
        self._registry.run(category, context)
