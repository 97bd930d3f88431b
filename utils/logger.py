"""
utils/logger.py
---------------
Logging setup shared by every module: `logger = get_logger(__name__)`.

Output goes to stdout at LOG_LEVEL. The bot token appears in every Bot API
URL that httpx logs, so it is masked before any record is written.
"""

import logging
import sys

from config import LOG_LEVEL, TELEGRAM_BOT_TOKEN

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_MASK = "<bot-token>"

# These log every Telegram HTTP round-trip at INFO.
_CHATTY_LIBRARIES = ("httpx", "httpcore", "apscheduler")

_configured = False


class TokenMaskFilter(logging.Filter):
    """Replaces a secret in the fully formatted message."""

    def __init__(self, secret: str):
        super().__init__()
        self.secret = secret

    def filter(self, record: logging.LogRecord) -> bool:
        if self.secret:
            message = record.getMessage()
            if self.secret in message:
                record.msg = message.replace(self.secret, _MASK)
                record.args = None
        return True


def _configure() -> None:
    global _configured
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
    handler.addFilter(TokenMaskFilter(TELEGRAM_BOT_TOKEN))

    root = logging.getLogger()
    root.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    root.addHandler(handler)
    for name in _CHATTY_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a named logger, configuring output on first use.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        A logger that writes through the shared stdout handler.
    """
    _configure()
    return logging.getLogger(name)
