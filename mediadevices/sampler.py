"""Samplers that tell how many clock ticks each media sample lasts."""

from __future__ import annotations

import math
import time
from datetime import timedelta
from typing import Callable, Union

Sampler = Callable[[], int]


def _round_to_uint32(value: float) -> int:
    """Round half away from zero and wrap into the unsigned 32-bit range."""
    rounded = math.floor(abs(value) + 0.5)
    if value < 0:
        rounded = -rounded
    return rounded & 0xFFFFFFFF


def video_sampler(clock_rate: int, clock: Callable[[], float] = time.monotonic) -> Sampler:
    """Return a sampler measuring the real time elapsed since its previous call."""
    last = clock()

    def sample() -> int:
        nonlocal last
        now = clock()
        samples = _round_to_uint32(clock_rate * (now - last))
        last = now
        return samples

    return sample


def audio_sampler(clock_rate: int, latency: Union[timedelta, float]) -> Sampler:
    """Return a sampler giving a fixed duration derived from ``latency``."""
    seconds = latency.total_seconds() if isinstance(latency, timedelta) else float(latency)
    samples = _round_to_uint32(clock_rate * seconds)
    return lambda: samples