"""Update dispatching: categories, contexts, the handler registry and :class:`EventLoop`.

This package sits on top of ``loopgram.core``, ``loopgram.sdk`` and
``loopgram.types``; none of those may import from it.
"""

from loopgram.event_loop.categories import Capability, Category, capabilities
from loopgram.event_loop.contexts import (
    CallbackContext,
    MessageContext,
    QueryContext,
    UnhandledContext,
    UpdateContext,
)
from loopgram.event_loop.dispatcher import EventLoop
from loopgram.event_loop.registry import Handler, HandlerRegistry

__all__ = [
    "Capability",
    "Category",
    "capabilities",
    "CallbackContext",
    "MessageContext",
    "QueryContext",
    "UnhandledContext",
    "UpdateContext",
    "EventLoop",
    "Handler",
    "HandlerRegistry",
]
