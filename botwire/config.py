"""Environment configuration -- build a :class:`BotContext` from ``.env`` / os.environ.

Reads ``BOT_TOKEN`` plus the optional ``BOTWIRE_*`` overrides via
``python-dotenv``::

    from botwire.config import load_settings

    context = load_settings().to_context()
"""

# ── stdlib ───────────────────────────────────────────────────────────────────
import logging
import os
from dataclasses import dataclass, field
from typing import Optional

# ── third-party ──────────────────────────────────────────────────────────────
from dotenv import load_dotenv

# ── botwire ──────────────────────────────────────────────────────────────────
from botwire.context import API_BASE_URL, DEFAULT_TIMEOUT, FILE_BASE_URL, BotContext
from botwire.logger import BotwireLogger


# ── Helper functions (private) ───────────────────────────────────────────────


def _parse_timeout(raw: Optional[str], logger: logging.Logger) -> float:
    """Parse ``BOTWIRE_TIMEOUT`` seconds; invalid or non-positive values fall back to the default."""
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid BOTWIRE_TIMEOUT, using default", extra={"value": raw, "default": DEFAULT_TIMEOUT})
        return DEFAULT_TIMEOUT
    if value <= 0:
        logger.warning("Non-positive BOTWIRE_TIMEOUT, using default", extra={"value": raw, "default": DEFAULT_TIMEOUT})
        return DEFAULT_TIMEOUT
    return value


def _parse_bool(raw: Optional[str]) -> bool:
    return (raw or "").strip().lower() in {"1", "true", "yes", "on"}


# ── Public API ───────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Settings:
    """Resolved configuration values."""

    bot_token: Optional[str] = field(repr=False)
    api_base_url: str = API_BASE_URL
    file_base_url: str = FILE_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    verbose: bool = False
    log_file: Optional[str] = None

    def to_context(self) -> BotContext:
        """Build the immutable :class:`BotContext`.

        Raises:
            EnvironmentError: If ``BOT_TOKEN`` is not set.
        """
        if not self.bot_token:
            raise EnvironmentError("BOT_TOKEN environment variable is not set or is empty.")
        return BotContext(
            token=self.bot_token,
            api_base_url=self.api_base_url,
            file_base_url=self.file_base_url,
            timeout=self.timeout,
            verbose=self.verbose,
        )


def load_settings(dotenv_path: Optional[str] = None) -> Settings:
    """Load ``.env`` (without overriding existing variables) and read settings."""
    load_dotenv(dotenv_path)

    verbose = _parse_bool(os.environ.get("BOTWIRE_VERBOSE"))
    log_file = os.environ.get("BOTWIRE_LOG_FILE") or None
    logger = BotwireLogger.get_logger(logging.DEBUG if verbose else logging.INFO, log_file)

    settings = Settings(
        bot_token=os.environ.get("BOT_TOKEN") or None,
        api_base_url=os.environ.get("BOTWIRE_API_BASE_URL") or API_BASE_URL,
        file_base_url=os.environ.get("BOTWIRE_FILE_BASE_URL") or FILE_BASE_URL,
        timeout=_parse_timeout(os.environ.get("BOTWIRE_TIMEOUT"), logger),
        verbose=verbose,
        log_file=log_file,
    )

    # ── Startup diagnostics ──────────────────────────────────────────────────
    if settings.bot_token:
        logger.info("Config loaded: BOT_TOKEN is set")
    else:
        logger.warning("Config loaded: BOT_TOKEN is NOT set")
    logger.info(
        "API endpoints resolved",
        extra={"api_base_url": settings.api_base_url, "timeout": settings.timeout},
    )
    return settings
