"""Bot API SDK: pydantic wire models, the blocking HTTP client and exceptions.

Usage::

    from loopgram.sdk import BotClient, APIException
    from loopgram.sdk.models import User, Message, Update
"""

from loopgram.sdk.client import BotClient
from loopgram.sdk.exceptions import (
    APIException,
    CapabilityError,
    LoopgramError,
    MissingUsernameError,
    NetworkError,
)

__all__ = [
    "BotClient",
    "APIException",
    "CapabilityError",
    "LoopgramError",
    "MissingUsernameError",
    "NetworkError",
]
