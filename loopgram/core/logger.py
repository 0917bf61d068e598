"""LoopgramLogger: singleton JSON logger for the library.

Every module logs through one ``logging.Logger`` named ``loopgram``.  Records
are rendered as single-line JSON on the console and, when a log directory is
configured, in a size-rotated file as well.
"""

import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Optional


class _JsonFormatter(logging.Formatter):
    """Render a record as one JSON object per line.

    The fixed keys are ``timestamp``, ``level``, ``logger``, ``message``,
    ``module`` and ``func_name``.  Anything passed through ``extra`` is
    merged in, which is how the dispatcher attaches ``update_id``,
    ``category``, ``command`` and friends::

        logger.debug("Routing miss", extra={"update_id": 7, "category": "photo"})
    """

    # Attributes every LogRecord carries; the rest came from ``extra``.
    _BUILTIN_ATTRS: frozenset[str] = frozenset(vars(logging.LogRecord(
        name="", level=0, pathname="", lineno=0, msg="", args=(), exc_info=None,
    ))) | {"message", "asctime", "taskName"}

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "func_name": record.funcName,
        }

        for key, value in record.__dict__.items():
            if key not in self._BUILTIN_ATTRS and key not in log_entry:
                log_entry[key] = value

        if record.exc_info:
            log_entry["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class LoopgramLogger:
    """Singleton owner of the ``loopgram`` logger and its handlers.

    Usage::

        from loopgram.core.logger import LoopgramLogger

        logger = LoopgramLogger.get_logger()
        logger.info("Event loop ready", extra={"username": "mybot"})
    """

    _instance: Optional["LoopgramLogger"] = None
    _logger: Optional[logging.Logger] = None

    LOGGER_NAME: str = "loopgram"
    _LOG_FILE: str = "loopgram.log"
    _MAX_BYTES: int = 5 * 1024 * 1024  # 5 MB
    _BACKUP_COUNT: int = 5

    def __new__(cls, level: int = logging.INFO, log_dir: str | None = None) -> "LoopgramLogger":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._init_logger(level, log_dir)
        return cls._instance

    # ------------------------------------------------------------------
    # Initialisation helpers
    # ------------------------------------------------------------------

    def _init_logger(self, level: int, log_dir: str | None) -> logging.Logger:
        """Create the underlying logger; the file handler is opt-in."""
        logger = logging.getLogger(self.LOGGER_NAME)
        logger.setLevel(level)
        self._logger = logger

        if logger.handlers:
            return logger

        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(level)
        stream_handler.setFormatter(_JsonFormatter())
        logger.addHandler(stream_handler)

        if log_dir:
            self._add_file_handler(logger, level, log_dir)
        return logger

    def _logger_or_init(self, level: int, log_dir: str | None) -> logging.Logger:
        if self._logger is None:
            return self._init_logger(level, log_dir)
        return self._logger

    def _add_file_handler(self, logger: logging.Logger, level: int, log_dir: str) -> None:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(log_dir, self._LOG_FILE),
            maxBytes=self._MAX_BYTES,
            backupCount=self._BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(_JsonFormatter())
        logger.addHandler(file_handler)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @staticmethod
    def get_logger(level: int = logging.INFO, log_dir: str | None = None) -> logging.Logger:
        """Return the shared logger, creating it on first call.

        *level* and *log_dir* only take effect on that first call.
        """
        return LoopgramLogger(level, log_dir)._logger_or_init(level, log_dir)

    @classmethod
    def configure(cls, level: int, log_dir: str | None = None) -> logging.Logger:
        """Apply *level* to the logger and its handlers, attaching the rotating
        file handler if *log_dir* is given and none is attached yet.

        Modules grab the logger at import time, often before
        :mod:`loopgram.config` has run, so the configured level is applied
        here rather than through the first :meth:`get_logger` call.
        """
        instance = cls(level, log_dir)
        logger = instance._logger_or_init(level, log_dir)
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)
        has_file = any(isinstance(h, RotatingFileHandler) for h in logger.handlers)
        if log_dir and not has_file:
            instance._add_file_handler(logger, level, log_dir)
        return logger

    def cleanup(self) -> None:
        """Flush, close and detach all handlers."""
        if self._logger is None:
            return
        for handler in list(self._logger.handlers):
            handler.flush()
            handler.close()
            self._logger.removeHandler(handler)
