"""Framework-agnostic helpers: logging, command parsing and the bot identity gate.

This package may import from ``loopgram.types`` only.  It must NEVER import
from ``loopgram.event_loop`` or ``loopgram.sdk.client``.
"""

from loopgram.core.commands import is_command, parse_command, trim_command
from loopgram.core.identity import is_for_this_bot
from loopgram.core.logger import LoopgramLogger

__all__ = [
    "is_command",
    "parse_command",
    "trim_command",
    "is_for_this_bot",
    "LoopgramLogger",
]
