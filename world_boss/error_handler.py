"""Classification and reporting of contract failures."""

import logging
from enum import Enum
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class ErrorKind(Enum):
    """User-facing categories for chain failures."""
    BOSS_NOT_ACTIVE = "boss_not_active"
    BOSS_ALREADY_DEFEATED = "boss_already_defeated"
    BOSS_TEMPORARILY_UNAVAILABLE = "boss_temporarily_unavailable"
    UNCLASSIFIED = "unclassified"


# Revert reasons emitted by the boss contracts
FAULT_PHRASES = (
    ("Boss not active", ErrorKind.BOSS_NOT_ACTIVE),
    ("Boss already defeated", ErrorKind.BOSS_ALREADY_DEFEATED),
    ("Boss cannot be attacked now", ErrorKind.BOSS_TEMPORARILY_UNAVAILABLE),
)

USER_MESSAGES = {
    ErrorKind.BOSS_NOT_ACTIVE: "The boss is not active.",
    ErrorKind.BOSS_ALREADY_DEFEATED: "The boss has already been defeated.",
    ErrorKind.BOSS_TEMPORARILY_UNAVAILABLE: "The boss cannot be attacked right now.",
}


def classify_error(message: Optional[str]) -> ErrorKind:
    """Map a raw failure message to an ErrorKind."""
    if message:
        for phrase, kind in FAULT_PHRASES:
            if phrase in message:
                return kind
    return ErrorKind.UNCLASSIFIED


def describe(kind: ErrorKind, raw_message: str) -> str:
    """Message to show a user for a classified failure."""
    return USER_MESSAGES.get(kind, f"Transaction failed: {raw_message}")


class ErrorHandler:
    """Centralized classification and logging of gateway failures.

    Only reports; the caller always re-raises the original error.
    """

    def __init__(self):
        self.error_counts: Dict[ErrorKind, int] = {}

    def handle(self, error: Exception, operation: str = "") -> ErrorKind:
        """Classify, count and log an error."""
        message = str(error)
        kind = classify_error(message)
        self.error_counts[kind] = self.error_counts.get(kind, 0) + 1

        where = f" in {operation}" if operation else ""
        if kind is ErrorKind.UNCLASSIFIED:
            logger.error(f"Chain call failed{where}: {message}")
        else:
            logger.error(f"Chain call failed{where}: {describe(kind, message)}")
        return kind
