"""Library configuration: environment variables and derived constants.

Reads ``BOT_TOKEN``, ``BOT_USERNAME``, ``API_BASE_URL``, ``REQUEST_TIMEOUT``,
``LOG_LEVEL`` and ``LOG_DIR`` from the environment via ``python-dotenv``.
Values are resolved once at import time; :meth:`BotClient.from_config` and
:meth:`EventLoop.from_config` read them from here.
"""

# ── stdlib ───────────────────────────────────────────────────────────────────
import logging
import os

# ── third-party ──────────────────────────────────────────────────────────────
from dotenv import load_dotenv

# ── core ─────────────────────────────────────────────────────────────────────
from loopgram.core.logger import LoopgramLogger

# ── Environment bootstrap ────────────────────────────────────────────────────
load_dotenv()

_DEFAULT_API_BASE_URL = "https://api.telegram.org"
_DEFAULT_TIMEOUT = 10


# ── Helper functions (private) ───────────────────────────────────────────────


def _parse_log_level(raw: str | None) -> int:
    """Map a level name such as ``"debug"`` to its numeric value.

    Unknown names fall back to ``INFO``.
    """
    if not raw:
        return logging.INFO
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _parse_timeout(raw: str | None) -> tuple[int, bool]:
    """Parse ``REQUEST_TIMEOUT``; returns ``(seconds, was_valid)``."""
    if not raw:
        return _DEFAULT_TIMEOUT, True
    try:
        value = int(raw.strip())
    except ValueError:
        return _DEFAULT_TIMEOUT, False
    if value <= 0:
        return _DEFAULT_TIMEOUT, False
    return value, True


def _parse_username(raw: str | None) -> str | None:
    """Normalise ``BOT_USERNAME``; a leading ``@`` is tolerated."""
    if not raw:
        return None
    username = raw.strip().lstrip("@")
    return username or None


# ── Public constants ─────────────────────────────────────────────────────────

LOG_LEVEL: int = _parse_log_level(os.environ.get("LOG_LEVEL"))
LOG_DIR: str | None = os.environ.get("LOG_DIR") or None

logger = LoopgramLogger.configure(LOG_LEVEL, LOG_DIR)

BOT_TOKEN: str | None = os.environ.get("BOT_TOKEN")
BOT_USERNAME: str | None = _parse_username(os.environ.get("BOT_USERNAME"))
API_BASE_URL: str = (os.environ.get("API_BASE_URL") or _DEFAULT_API_BASE_URL).rstrip("/")
BASE_URL: str = f"{API_BASE_URL}/bot{BOT_TOKEN or ''}"
REQUEST_TIMEOUT, _timeout_valid = _parse_timeout(os.environ.get("REQUEST_TIMEOUT"))


# ── Startup diagnostics ─────────────────────────────────────────────────────

if BOT_TOKEN:
    logger.debug("Config loaded, BOT_TOKEN is set", extra={"api_base_url": API_BASE_URL})
else:
    logger.debug("Config loaded, BOT_TOKEN is NOT set")

if not _timeout_valid:
    logger.warning(
        "Invalid REQUEST_TIMEOUT, using default",
        extra={"raw": os.environ.get("REQUEST_TIMEOUT"), "timeout": REQUEST_TIMEOUT},
    )

if BOT_USERNAME:
    logger.debug("BOT_USERNAME loaded", extra={"username": BOT_USERNAME})
