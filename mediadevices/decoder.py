"""Decoders that turn raw PCM bytes into audio containers."""

from __future__ import annotations

import sys
from array import array
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Union

from mediadevices.wave import (
    ChunkInfo,
    Float32Interleaved,
    Float32NonInterleaved,
    Int16Interleaved,
    Int16NonInterleaved,
)

Audio = Union[Int16Interleaved, Int16NonInterleaved, Float32Interleaved, Float32NonInterleaved]


class Endian(Enum):
    """Byte order of raw sample data."""

    BIG = "big"
    LITTLE = "little"


HOST_ENDIAN = Endian(sys.byteorder)


class DecoderError(ValueError):
    """Raised when raw audio cannot be decoded or a decoder cannot be found."""


@dataclass(frozen=True)
class RawFormat:
    """How raw audio is laid out in memory."""

    sample_size: int
    is_float: bool
    interleaved: bool

    def __str__(self) -> str:
        kind = "Float" if self.is_float else "Int"
        layout = "Interleaved" if self.interleaved else "NonInterleaved"
        return f"{kind}{self.sample_size * 8}{layout}"


Decoder = Callable[[Endian, bytes, int], Audio]

_registered_decoders: Dict[str, Decoder] = {}


def calculate_chunk_info(chunk: bytes, channels: int, sample_size: int) -> ChunkInfo:
    """Work out how many samples per channel ``chunk`` holds."""
    if channels <= 0:
        raise DecoderError("channels has to be greater than 0")
    if sample_size <= 0:
        raise DecoderError("sample size has to be greater than 0")
    chunk = chunk or b""
    sample_len = channels * sample_size
    remainder = len(chunk) % sample_len
    if remainder:
        expected = len(chunk) + (sample_len - remainder)
        raise DecoderError(f"expected chunk to have a length of {expected}, but got {len(chunk)}")
    return ChunkInfo(length=len(chunk) // sample_len, channels=channels)


def _to_array(typecode: str, endian: Endian, raw: bytes) -> array:
    values = array(typecode)
    values.frombytes(raw)
    if endian is not HOST_ENDIAN:
        values.byteswap()
    return values


def _split_channels(chunk: bytes, channels: int) -> list:
    per_channel = len(chunk) // channels
    return [chunk[ch * per_channel:(ch + 1) * per_channel] for ch in range(channels)]


def decode_int16_interleaved(endian: Endian, chunk: bytes, channels: int) -> Int16Interleaved:
    """Decode interleaved signed 16-bit samples."""
    chunk = bytes(chunk or b"")
    info = calculate_chunk_info(chunk, channels, 2)
    return Int16Interleaved(_to_array("h", endian, chunk), info)


def decode_int16_non_interleaved(endian: Endian, chunk: bytes, channels: int) -> Int16NonInterleaved:
    """Decode signed 16-bit samples stored one channel after another."""
    chunk = bytes(chunk or b"")
    info = calculate_chunk_info(chunk, channels, 2)
    data = [_to_array("h", endian, part) for part in _split_channels(chunk, channels)]
    return Int16NonInterleaved(data, info)


def decode_float32_interleaved(endian: Endian, chunk: bytes, channels: int) -> Float32Interleaved:
    """Decode interleaved 32-bit float samples."""
    chunk = bytes(chunk or b"")
    info = calculate_chunk_info(chunk, channels, 4)
    return Float32Interleaved(_to_array("f", endian, chunk), info)


def decode_float32_non_interleaved(endian: Endian, chunk: bytes, channels: int) -> Float32NonInterleaved:
    """Decode 32-bit float samples stored one channel after another."""
    chunk = bytes(chunk or b"")
    info = calculate_chunk_info(chunk, channels, 4)
    data = [_to_array("f", endian, part) for part in _split_channels(chunk, channels)]
    return Float32NonInterleaved(data, info)


def register_decoder(raw_format: RawFormat, decoder: Decoder) -> None:
    """Register ``decoder`` for ``raw_format``; each format may be registered once."""
    key = str(raw_format)
    if key in _registered_decoders:
        raise DecoderError(f"{key} has already been registered")
    _registered_decoders[key] = decoder


def new_decoder(raw_format: RawFormat) -> Decoder:
    """Return the decoder registered for ``raw_format``."""
    try:
        return _registered_decoders[str(raw_format)]
    except KeyError:
        raise DecoderError(f"{raw_format} format is not supported") from None


register_decoder(RawFormat(2, False, True), decode_int16_interleaved)
register_decoder(RawFormat(2, False, False), decode_int16_non_interleaved)
register_decoder(RawFormat(4, True, True), decode_float32_interleaved)
register_decoder(RawFormat(4, True, False), decode_float32_non_interleaved)