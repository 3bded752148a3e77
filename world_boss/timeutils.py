"""Timezone-aware time utilities for chain timestamps."""

import datetime
from zoneinfo import ZoneInfo
from .config import TIMEZONE


def get_timezone():
    """Get the timezone object used for display."""
    return ZoneInfo(TIMEZONE)


def from_chain_time(seconds: int) -> datetime.datetime:
    """Convert a block timestamp (seconds since epoch) to an aware datetime."""
    return datetime.datetime.fromtimestamp(int(seconds), get_timezone())
