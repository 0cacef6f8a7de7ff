"""BotwireLogger -- Singleton JSON logger with console and optional rotating file output.

Every module of the SDK logs through the shared ``botwire`` logger so that
request tracing, dropped-field diagnostics, and transport failures all end up
as one structured JSON line each.
"""

import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Optional


class _JsonFormatter(logging.Formatter):
    """One JSON object per record: ``ts``, ``level``, ``logger``, ``msg``.

    ``extra=`` keys such as ``api_endpoint``, ``field`` and ``error`` are
    copied to the top level; a traceback, when attached, lands in ``exc``.
    """

    _RECORD_ATTRS: frozenset[str] = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

    def format(self, record: logging.LogRecord) -> str:
        entry: dict = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        entry.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in self._RECORD_ATTRS and key not in entry
        )
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class BotwireLogger:
    """Singleton logger with a console handler and an optional rotating file.

    Usage::

        from botwire.logger import BotwireLogger

        logger = BotwireLogger.get_logger()
        logger.info("Bot context ready")

    The file handler is attached only when a log file is given, either by the
    first ``get_logger(log_file=...)`` call or by the ``BOTWIRE_LOG_FILE``
    environment variable.
    """

    _instance: Optional["BotwireLogger"] = None
    _logger: Optional[logging.Logger] = None

    _LOGGER_NAME: str = "botwire"
    _MAX_BYTES: int = 5 * 1024 * 1024  # 5 MB
    _BACKUP_COUNT: int = 5

    def __new__(cls, level: int = logging.INFO, log_file: Optional[str] = None) -> "BotwireLogger":
        """Ensure only one instance is ever created (Singleton)."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._init_logger(level, log_file)
        return cls._instance

    def _init_logger(self, level: int, log_file: Optional[str]) -> None:
        """Create the underlying :class:`logging.Logger` and attach handlers."""
        self._logger = logging.getLogger(self._LOGGER_NAME)
        self._logger.setLevel(level)

        # Avoid duplicate handlers if the module is reloaded.
        if self._logger.handlers:
            return

        formatter = _JsonFormatter()

        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(level)
        stream_handler.setFormatter(formatter)
        self._logger.addHandler(stream_handler)

        log_file = log_file or os.environ.get("BOTWIRE_LOG_FILE")
        if not log_file:
            return

        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=self._MAX_BYTES,
            backupCount=self._BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        self._logger.addHandler(file_handler)

    @staticmethod
    def get_logger(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
        """Return the shared :class:`logging.Logger` instance.

        Creates the singleton on first call; subsequent calls return the
        same logger regardless of the arguments.
        """
        instance = BotwireLogger(level, log_file)
        assert instance._logger is not None  # guaranteed by __new__
        return instance._logger

    def cleanup(self) -> None:
        """Flush and close all handlers attached to the logger."""
        if self._logger is None:
            return
        for handler in list(self._logger.handlers):
            handler.flush()
            handler.close()
            self._logger.removeHandler(handler)
