"""
Shared utility functions.

Clocks are expressed in milliseconds throughout the engine.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def epoch_ms() -> float:
    """
    Wall-clock time in milliseconds.

    Used for persisted timestamps, which must survive a process restart.
    """
    return time.time() * 1000


def monotonic_ms() -> float:
    """Monotonic time in milliseconds, for measuring intervals."""
    return time.monotonic() * 1000
