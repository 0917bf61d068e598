"""Handler registry: category and command-name lookups for the event loop.

Design:
- ``Handler`` is a :class:`Protocol` for anything called with one context.
  Plain functions are called inline; coroutine functions are launched as
  :class:`asyncio.Task` objects on the running loop and not awaited.
  A failing handler is logged and reported to the running loop's exception
  handler; the handlers after it still run.
- ``HandlerEntry`` records the handler and which of the two it is, decided
  once at registration.
- ``HandlerRegistry`` keeps one append-only list per :class:`Category` plus
  the command and edited-command maps.  Each :class:`EventLoop` owns one.
"""

from __future__ import annotations

import asyncio
import dataclasses
import inspect
from typing import Any, Protocol, runtime_checkable

from loopgram.core.logger import LoopgramLogger
from loopgram.event_loop.categories import Category

logger = LoopgramLogger.get_logger()


# ── Handler protocol ─────────────────────────────────────────────────────────

@runtime_checkable
class Handler(Protocol):
    """Callable taking the category's context; may be ``async``."""
    def __call__(self, context: Any) -> Any: ...  # noqa: E704


# ── Registry entry ───────────────────────────────────────────────────────────

@dataclasses.dataclass(frozen=True, slots=True)
class HandlerEntry:
    handler: Handler
    is_coroutine: bool

    @classmethod
    def wrap(cls, handler: Handler) -> HandlerEntry:
        is_coroutine = inspect.iscoroutinefunction(handler) or inspect.iscoroutinefunction(
            getattr(handler, "__call__", None)
        )
        return cls(handler=handler, is_coroutine=is_coroutine)


# ── Registry ─────────────────────────────────────────────────────────────────

class HandlerRegistry:
    """Ordered handler lists per category and per command name.

    Usage::

        registry = HandlerRegistry()
        registry.register(Category.TEXT, on_text)
        registry.register_command("start", on_start)

        if registry.will_handle(Category.TEXT):
            registry.run(Category.TEXT, context)
    """

    def __init__(self) -> None:
        self._handlers: dict[Category, list[HandlerEntry]] = {}
        self._commands: dict[str, list[HandlerEntry]] = {}
        self._edited_commands: dict[str, list[HandlerEntry]] = {}
        self._tasks: set[asyncio.Task[Any]] = set()

    # ── categories ───────────────────────────────────────────────────────

    def register(self, category: Category, handler: Handler) -> None:
        """Append *handler* to *category*; registering twice runs it twice."""
        self._handlers.setdefault(category, []).append(HandlerEntry.wrap(handler))

    def will_handle(self, category: Category) -> bool:
        return bool(self._handlers.get(category))

    def run(self, category: Category, context: Any) -> None:
        """Call or launch every handler of *category*, in registration order."""
        self._run_all(self._handlers.get(category, ()), context)

    # ── commands ─────────────────────────────────────────────────────────

    def register_command(self, name: str, handler: Handler) -> None:
        self._commands.setdefault(name, []).append(HandlerEntry.wrap(handler))

    def contains_command(self, name: str) -> bool:
        return name in self._commands

    def run_command(self, name: str, context: Any) -> None:
        self._run_all(self._commands.get(name, ()), context)

    def register_edited_command(self, name: str, handler: Handler) -> None:
        self._edited_commands.setdefault(name, []).append(HandlerEntry.wrap(handler))

    def contains_edited_command(self, name: str) -> bool:
        return name in self._edited_commands

    def run_edited_command(self, name: str, context: Any) -> None:
        self._run_all(self._edited_commands.get(name, ()), context)

    # ── invocation ───────────────────────────────────────────────────────

    def _run_all(self, entries: Any, context: Any) -> None:
        for entry in entries:
            try:
                self._invoke(entry, context)
            except Exception as exc:
                name = getattr(entry.handler, "__qualname__", repr(entry.handler))
                logger.exception("Handler failed", extra={"handler": name, "error": str(exc)})
                self._report_failure(exc)

    @staticmethod
    def _report_failure(exc: Exception) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        loop.call_exception_handler({
            "message": "Unhandled exception in loopgram handler",
            "exception": exc,
        })

    def _invoke(self, entry: HandlerEntry, context: Any) -> None:
        if not entry.is_coroutine:
            entry.handler(context)
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            raise RuntimeError("coroutine handlers require a running event loop") from None

        task = loop.create_task(entry.handler(context))
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is None:
            return
        logger.error("Handler task failed", extra={"task": task.get_name(), "error": str(exc)})
        task.get_loop().call_exception_handler({
            "message": "Unhandled exception in loopgram handler task",
            "exception": exc,
            "task": task,
        })

    @property
    def pending(self) -> int:
        """Number of handler tasks still running."""
        return len(self._tasks)

    async def join(self) -> None:
        """Wait until every launched handler task, including ones launched meanwhile, is done.

        Task failures are already reported by the done callback, so they are
        not re-raised here.
        """
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
