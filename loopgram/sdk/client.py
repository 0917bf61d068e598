"""BotClient -- the handful of Bot API calls the event loop and its contexts need.

HTTP calls use the ``requests`` library and are blocking; contexts run them
in a worker thread via :func:`asyncio.to_thread`.  Every method either
returns the decoded ``result`` (as a pydantic model where the API returns an
object) or raises :class:`~loopgram.sdk.exceptions.APIException`.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

import requests
from pydantic import BaseModel

from loopgram.core.logger import LoopgramLogger
from loopgram.sdk.exceptions import APIException
from loopgram.sdk.models import (
    InlineKeyboardMarkup,
    Message,
    ShippingOption,
    User,
)

logger = LoopgramLogger.get_logger()

ChatId = Union[int, str]


def _dump(value: Any) -> Any:
    """Serialise pydantic models (and lists of them) for a JSON payload."""
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, exclude_none=True)
    if isinstance(value, list):
        return [_dump(item) for item in value]
    return value


class BotClient:
    """Client-side service layer for the Telegram Bot API.

    One instance is shared by the event loop and every context it builds.
    It holds no mutable state, so sharing it across threads is safe.
    """

    _DEFAULT_TIMEOUT: int = 10

    def __init__(self, base_url: str, timeout: int = _DEFAULT_TIMEOUT) -> None:
        """Create a new client bound to *base_url*.

        Args:
            base_url: Full Bot API base URL (e.g. ``https://api.telegram.org/bot<token>``).
            timeout: Request timeout in seconds.
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    @classmethod
    def from_config(cls) -> BotClient:
        """Build a client from :mod:`loopgram.config`."""
        # Deferred: loopgram.config imports loopgram.core, whose package init
        # reaches this module through loopgram.types.
        from loopgram import config

        if not config.BOT_TOKEN:
            logger.warning("Building BotClient without BOT_TOKEN", extra={"api_base_url": config.API_BASE_URL})
        return cls(config.BASE_URL, timeout=config.REQUEST_TIMEOUT)

    # ------------------------------------------------------------------
    #  Internal helpers
    # ------------------------------------------------------------------

    def _post(self, endpoint: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Send a POST request and return the parsed JSON body.

        Raises:
            APIException: If the status code is not 2xx or the body says ``"ok": false``.
            requests.RequestException: On transport-level failures.
        """
        url = f"{self._base_url}/{endpoint.lstrip('/')}"
        logger.debug("Calling Bot API", extra={"api_endpoint": endpoint})
        response = requests.post(url, json=payload, timeout=self._timeout)
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not response.ok or body.get("ok") is False:
            logger.warning(
                "Bot API error",
                extra={
                    "api_endpoint": endpoint,
                    "status_code": response.status_code,
                    "description": body.get("description"),
                },
            )
            raise APIException(response.status_code, body)
        return body

    def _call(self, endpoint: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        payload = {k: _dump(v) for k, v in (payload or {}).items() if v is not None}
        return self._post(endpoint, payload).get("result")

    # ------------------------------------------------------------------
    #  Identity
    # ------------------------------------------------------------------

    def get_me(self) -> User:
        """Return the bot's own user object."""
        return User.model_validate(self._call("getMe"))

    # ------------------------------------------------------------------
    #  Messages
    # ------------------------------------------------------------------

    def send_message(
        self,
        chat_id: ChatId,
        text: str,
        parse_mode: Optional[str] = None,
        disable_notification: Optional[bool] = None,
        reply_to_message_id: Optional[int] = None,
        reply_markup: Optional[InlineKeyboardMarkup] = None,
    ) -> Message:
        result = self._call("sendMessage", {
            "chat_id": chat_id,
            "text": text,
            "parse_mode": parse_mode,
            "disable_notification": disable_notification,
            "reply_to_message_id": reply_to_message_id,
            "reply_markup": reply_markup,
        })
        return Message.model_validate(result)

    def forward_message(
        self,
        chat_id: ChatId,
        from_chat_id: ChatId,
        message_id: int,
        disable_notification: Optional[bool] = None,
    ) -> Message:
        result = self._call("forwardMessage", {
            "chat_id": chat_id,
            "from_chat_id": from_chat_id,
            "message_id": message_id,
            "disable_notification": disable_notification,
        })
        return Message.model_validate(result)

    def pin_chat_message(
        self,
        chat_id: ChatId,
        message_id: int,
        disable_notification: Optional[bool] = None,
    ) -> bool:
        return bool(self._call("pinChatMessage", {
            "chat_id": chat_id,
            "message_id": message_id,
            "disable_notification": disable_notification,
        }))

    def delete_message(self, chat_id: ChatId, message_id: int) -> bool:
        return bool(self._call("deleteMessage", {"chat_id": chat_id, "message_id": message_id}))

    # ------------------------------------------------------------------
    #  Queries
    # ------------------------------------------------------------------

    def answer_callback_query(
        self,
        callback_query_id: str,
        text: Optional[str] = None,
        show_alert: Optional[bool] = None,
        url: Optional[str] = None,
        cache_time: Optional[int] = None,
    ) -> bool:
        """Answer a button press; with no *text* the client just stops its spinner."""
        return bool(self._call("answerCallbackQuery", {
            "callback_query_id": callback_query_id,
            "text": text,
            "show_alert": show_alert,
            "url": url,
            "cache_time": cache_time,
        }))

    def answer_inline_query(
        self,
        inline_query_id: str,
        results: List[Dict[str, Any]],
        cache_time: Optional[int] = None,
        is_personal: Optional[bool] = None,
        next_offset: Optional[str] = None,
    ) -> bool:
        return bool(self._call("answerInlineQuery", {
            "inline_query_id": inline_query_id,
            "results": results,
            "cache_time": cache_time,
            "is_personal": is_personal,
            "next_offset": next_offset,
        }))

    def answer_shipping_query(
        self,
        shipping_query_id: str,
        ok: bool,
        shipping_options: Optional[List[ShippingOption]] = None,
        error_message: Optional[str] = None,
    ) -> bool:
        """Accept (*ok* with options) or reject (with *error_message*) a shipping address."""
        return bool(self._call("answerShippingQuery", {
            "shipping_query_id": shipping_query_id,
            "ok": ok,
            "shipping_options": shipping_options,
            "error_message": error_message,
        }))

    def answer_pre_checkout_query(
        self,
        pre_checkout_query_id: str,
        ok: bool,
        error_message: Optional[str] = None,
    ) -> bool:
        return bool(self._call("answerPreCheckoutQuery", {
            "pre_checkout_query_id": pre_checkout_query_id,
            "ok": ok,
            "error_message": error_message,
        }))


__all__ = ["BotClient", "ChatId"]
