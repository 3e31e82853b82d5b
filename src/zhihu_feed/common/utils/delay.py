"""Delay helpers shared across scraper components."""

from __future__ import annotations

import random


def get_random_delay(base: float, random_range: float) -> float:
    """Return a randomized delay in seconds."""
    return base + random.uniform(0, random_range)


def random_jitter(min_seconds: float, max_seconds: float) -> float:
    """Return a delay drawn uniformly from ``[min_seconds, max_seconds]``."""
    if max_seconds <= min_seconds:
        return max(min_seconds, 0.0)
    return get_random_delay(min_seconds, max_seconds - min_seconds)


def no_jitter(min_seconds: float, max_seconds: float) -> float:
    """Jitter function that never waits."""
    return 0.0
