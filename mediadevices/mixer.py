"""Channel mixers for audio chunks."""

from __future__ import annotations

from typing import Protocol

from mediadevices.wave import Int64Sample


class MixError(ValueError):
    """Raised when two audio chunks cannot be mixed."""


class ChannelMixer(Protocol):
    """Mixes audio into a specific channel layout."""

    def mix(self, dst, src) -> None:
        ...


class MonoMixer:
    """Mixes all source channels down to their mean in every destination channel."""

    def mix(self, dst, src) -> None:
        """Write the per-sample mean of ``src`` into every channel of ``dst``."""
        if dst.size.length != src.size.length:
            raise MixError("buffer size mismatch")
        if not callable(getattr(dst, "set", None)):
            raise MixError("destination buffer is not settable")

        channels = src.size.channels
        dst_channels = dst.size.channels
        for i in range(src.size.length):
            total = sum(src.at(i, ch).to_int() for ch in range(channels))
            mean = abs(total) // channels
            if total < 0:
                mean = -mean
            for ch in range(dst_channels):
                dst.set(i, ch, Int64Sample(mean))