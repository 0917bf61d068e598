"""loopgram: a Telegram Bot API client built around an update event loop.

Usage::

    from loopgram import BotClient, EventLoop

    loop = EventLoop(BotClient("https://api.telegram.org/bot<token>"), username="mybot")

    @loop.text
    async def echo(ctx):
        await ctx.send_message(ctx.text.value)
"""

# Imported first so LOG_LEVEL and LOG_DIR apply before anything logs.
from loopgram import config  # noqa: F401
from loopgram.event_loop import Category, EventLoop
from loopgram.sdk import (
    APIException,
    BotClient,
    CapabilityError,
    LoopgramError,
    MissingUsernameError,
    NetworkError,
)
from loopgram.types import Update

__version__ = "0.1.0"

__all__ = [
    "APIException",
    "BotClient",
    "CapabilityError",
    "Category",
    "EventLoop",
    "LoopgramError",
    "MissingUsernameError",
    "NetworkError",
    "Update",
]
