"""
User-facing notifications raised by the session manager.

Applications plug in their own INotifier (toast, status bar, CLI output).
The default implementation writes to the log.
"""

import logging
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class INotifier(Protocol):
    """Sink for short success and error messages shown to the user."""

    def success(self, message: str) -> None:
        ...

    def error(self, message: str) -> None:
        ...


class LoggingNotifier:
    """Notifier that logs messages instead of displaying them."""

    def success(self, message: str) -> None:
        logger.info(message)

    def error(self, message: str) -> None:
        logger.error(message)
