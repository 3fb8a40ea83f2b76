"""Audio samples, sample formats and in-memory audio chunk containers."""

from __future__ import annotations

import struct
from array import array
from dataclasses import dataclass, replace
from typing import Callable, Union


def _to_float32(value: float) -> float:
    """Round a Python float to the nearest single-precision value."""
    return struct.unpack("=f", struct.pack("=f", value))[0]


def _wrap_int16(value: int) -> int:
    """Wrap an integer into the signed 16-bit range."""
    return ((value + 0x8000) & 0xFFFF) - 0x8000


@dataclass
class ChunkInfo:
    """Size of an audio chunk."""

    length: int = 0
    channels: int = 0
    sampling_rate: int = 0


@dataclass(frozen=True)
class Int16Sample:
    """A 16-bit signed integer audio sample."""

    value: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", _wrap_int16(int(self.value)))

    def to_int(self) -> int:
        """Return the sample level on the common 64-bit scale."""
        return self.value << 16


@dataclass(frozen=True)
class Float32Sample:
    """A 32-bit float audio sample."""

    value: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", _to_float32(float(self.value)))

    def to_int(self) -> int:
        """Return the sample level on the common 64-bit scale."""
        return int(self.value * 4294967296.0)


@dataclass(frozen=True)
class Int64Sample:
    """A 64-bit signed integer audio sample."""

    value: int

    def to_int(self) -> int:
        """Return the sample level on the common 64-bit scale."""
        return int(self.value)


Sample = Union[Int16Sample, Float32Sample, Int64Sample]


@dataclass(frozen=True)
class SampleFormat:
    """Converts any sample into one of its own format."""

    name: str
    converter: Callable[[Sample], Sample]

    def convert(self, sample: Sample) -> Sample:
        """Return ``sample`` expressed in this format."""
        return self.converter(sample)


def _convert_int16(sample: Sample) -> Sample:
    if isinstance(sample, Int16Sample):
        return sample
    return Int16Sample(sample.to_int() >> 16)


def _convert_float32(sample: Sample) -> Sample:
    if isinstance(sample, Float32Sample):
        return sample
    return Float32Sample(_to_float32(float(sample.to_int())) / 4294967296.0)


INT16_SAMPLE_FORMAT = SampleFormat("Int16", _convert_int16)
FLOAT32_SAMPLE_FORMAT = SampleFormat("Float32", _convert_float32)


@dataclass
class Int16Interleaved:
    """Multi-channel interleaved 16-bit integer audio."""

    data: array
    size: ChunkInfo

    @classmethod
    def zeros(cls, size: ChunkInfo) -> Int16Interleaved:
        """Create silent audio of the given size."""
        return cls(array("h", [0]) * (size.channels * size.length), replace(size))

    @property
    def sample_format(self) -> SampleFormat:
        return INT16_SAMPLE_FORMAT

    def at(self, i: int, ch: int) -> Int16Sample:
        return Int16Sample(self.data[i * self.size.channels + ch])

    def set(self, i: int, ch: int, sample: Sample) -> None:
        self.data[i * self.size.channels + ch] = INT16_SAMPLE_FORMAT.convert(sample).value

    def set_int16(self, i: int, ch: int, sample: Int16Sample) -> None:
        self.data[i * self.size.channels + ch] = sample.value

    def sub_audio(self, offset_samples: int, n_samples: int) -> Int16Interleaved:
        """Return ``n_samples`` samples starting at ``offset_samples``."""
        channels = self.size.channels
        start = offset_samples * channels
        data = self.data[start:start + n_samples * channels]
        return Int16Interleaved(data, replace(self.size, length=n_samples))


@dataclass
class Int16NonInterleaved:
    """Multi-channel 16-bit integer audio stored one channel after another."""

    data: list
    size: ChunkInfo

    @classmethod
    def zeros(cls, size: ChunkInfo) -> Int16NonInterleaved:
        """Create silent audio of the given size."""
        return cls([array("h", [0]) * size.length for _ in range(size.channels)], replace(size))

    @property
    def sample_format(self) -> SampleFormat:
        return INT16_SAMPLE_FORMAT

    def at(self, i: int, ch: int) -> Int16Sample:
        return Int16Sample(self.data[ch][i])

    def set(self, i: int, ch: int, sample: Sample) -> None:
        self.data[ch][i] = INT16_SAMPLE_FORMAT.convert(sample).value

    def set_int16(self, i: int, ch: int, sample: Int16Sample) -> None:
        self.data[ch][i] = sample.value

    def sub_audio(self, offset_samples: int, n_samples: int) -> Int16NonInterleaved:
        """Return ``n_samples`` samples starting at ``offset_samples``."""
        end = offset_samples + n_samples
        data = [channel[offset_samples:end] for channel in self.data]
        return Int16NonInterleaved(data, replace(self.size, length=n_samples))


@dataclass
class Float32Interleaved:
    """Multi-channel interleaved 32-bit float audio."""

    data: array
    size: ChunkInfo

    @classmethod
    def zeros(cls, size: ChunkInfo) -> Float32Interleaved:
        """Create silent audio of the given size."""
        return cls(array("f", [0.0]) * (size.channels * size.length), replace(size))

    @property
    def sample_format(self) -> SampleFormat:
        return FLOAT32_SAMPLE_FORMAT

    def at(self, i: int, ch: int) -> Float32Sample:
        return Float32Sample(self.data[i * self.size.channels + ch])

    def set(self, i: int, ch: int, sample: Sample) -> None:
        self.data[i * self.size.channels + ch] = FLOAT32_SAMPLE_FORMAT.convert(sample).value

    def set_float32(self, i: int, ch: int, sample: Float32Sample) -> None:
        self.data[i * self.size.channels + ch] = sample.value

    def sub_audio(self, offset_samples: int, n_samples: int) -> Float32Interleaved:
        """Return ``n_samples`` samples starting at ``offset_samples``."""
        channels = self.size.channels
        start = offset_samples * channels
        data = self.data[start:start + n_samples * channels]
        return Float32Interleaved(data, replace(self.size, length=n_samples))


@dataclass
class Float32NonInterleaved:
    """Multi-channel 32-bit float audio stored one channel after another."""

    data: list
    size: ChunkInfo

    @classmethod
    def zeros(cls, size: ChunkInfo) -> Float32NonInterleaved:
        """Create silent audio of the given size."""
        return cls([array("f", [0.0]) * size.length for _ in range(size.channels)], replace(size))

    @property
    def sample_format(self) -> SampleFormat:
        return FLOAT32_SAMPLE_FORMAT

    def at(self, i: int, ch: int) -> Float32Sample:
        return Float32Sample(self.data[ch][i])

    def set(self, i: int, ch: int, sample: Sample) -> None:
        self.data[ch][i] = FLOAT32_SAMPLE_FORMAT.convert(sample).value

    def set_float32(self, i: int, ch: int, sample: Float32Sample) -> None:
        self.data[ch][i] = sample.value

    def sub_audio(self, offset_samples: int, n_samples: int) -> Float32NonInterleaved:
        """Return ``n_samples`` samples starting at ``offset_samples``."""
        end = offset_samples + n_samples
        data = [channel[offset_samples:end] for channel in self.data]
        return Float32NonInterleaved(data, replace(self.size, length=n_samples))