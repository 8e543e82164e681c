"""
Lingobatch - request-batching and caching engine for UI translation.

Sits between UI text and a remote translation provider: coalesces calls
into few round-trips, rate-limits toward the provider, and caches results
with expiry so repeat views skip the network.
"""

__version__ = "0.1.0"
