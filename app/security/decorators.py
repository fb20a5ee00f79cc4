from __future__ import annotations

from collections.abc import Callable


def rate_limited() -> Callable:
    """
    Mark an endpoint as guarded by the per-address rate limiter.

    Implementation detail:
    - This decorator does NOT count anything itself.
    - It attaches metadata that the global security dependency reads
      *after* routing (during dependency resolution).
    """

    def decorator(fn: Callable) -> Callable:
        setattr(fn, "__security_rate_limited__", True)
        return fn

    return decorator
