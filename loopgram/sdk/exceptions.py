"""Exception hierarchy for the loopgram SDK."""

from typing import Any, Dict, Optional


class LoopgramError(Exception):
    """Base class for every error raised by loopgram."""


class APIException(LoopgramError):
    """The Bot API answered with a non-2xx status or ``"ok": false``.

    Attributes:
        status_code: HTTP status code returned by the API.
        response_body: Raw response body as a dict, when available.
    """

    def __init__(self, status_code: int, response_body: Optional[Dict[str, Any]] = None) -> None:
        self.status_code = status_code
        self.response_body = response_body or {}
        description = self.response_body.get("description", "Unknown error")
        super().__init__(f"API error {status_code}: {description}")


class NetworkError(LoopgramError):
    """The request never produced an HTTP response (DNS, TLS, timeout, ...)."""


class MissingUsernameError(LoopgramError):
    """``getMe`` returned a user without a username.

    Bot accounts always have one, so this means the token does not belong
    to a bot or the response was malformed.
    """


class CapabilityError(LoopgramError):
    """A follow-up action was requested on a context that does not allow it.

    Attributes:
        category: Name of the context's category, e.g. ``"new_members"``.
        capability: Name of the missing capability, e.g. ``"PIN"``.
    """

    def __init__(self, category: str, capability: str) -> None:
        self.category = category
        self.capability = capability
        super().__init__(f"'{category}' contexts do not support {capability}")
