"""
Core helpers shared across the engine.
"""

from lingobatch.core.utils import utc_now, epoch_ms, monotonic_ms

__all__ = [
    "utc_now",
    "epoch_ms",
    "monotonic_ms",
]
