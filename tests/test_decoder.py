import struct
from array import array

import pytest

from mediadevices.decoder import (
    DecoderError,
    Endian,
    RawFormat,
    calculate_chunk_info,
    decode_float32_interleaved,
    decode_float32_non_interleaved,
    decode_int16_interleaved,
    decode_int16_non_interleaved,
    new_decoder,
    register_decoder,
)
from mediadevices.wave import (
    ChunkInfo,
    Float32Interleaved,
    Float32NonInterleaved,
    Int16Interleaved,
    Int16NonInterleaved,
)


@pytest.mark.parametrize(
    "chunk, channels, sample_size",
    [
        (bytes(3), 2, 2),
        (bytes(4), 2, 4),
        (b"", 0, 2),
        (b"", 2, 0),
    ],
    ids=["InvalidChunkSize1", "InvalidChunkSize2", "InvalidChannels", "InvalidSampleSize"],
)
def test_calculate_chunk_info_errors(chunk, channels, sample_size):
    with pytest.raises(DecoderError):
        calculate_chunk_info(chunk, channels, sample_size)


@pytest.mark.parametrize(
    "chunk, channels, sample_size, expected",
    [
        (b"", 2, 2, ChunkInfo(0, 2, 0)),
        (bytes(8), 2, 4, ChunkInfo(1, 2, 0)),
        (bytes(4), 1, 2, ChunkInfo(2, 1, 0)),
    ],
    ids=["Valid1", "Valid2", "Valid3"],
)
def test_calculate_chunk_info_valid(chunk, channels, sample_size, expected):
    assert calculate_chunk_info(chunk, channels, sample_size) == expected


def test_calculate_chunk_info_error_message():
    with pytest.raises(DecoderError, match="length of 4, but got 3"):
        calculate_chunk_info(bytes(3), 2, 2)


@pytest.mark.parametrize(
    "raw_format, decoder",
    [
        (RawFormat(2, False, False), decode_int16_non_interleaved),
        (RawFormat(4, True, False), decode_float32_non_interleaved),
        (RawFormat(2, False, True), decode_int16_interleaved),
        (RawFormat(4, True, True), decode_float32_interleaved),
    ],
)
def test_new_decoder(raw_format, decoder):
    assert new_decoder(raw_format) is decoder


def test_new_decoder_unsupported():
    with pytest.raises(DecoderError, match="not supported"):
        new_decoder(RawFormat(3, False, True))


def test_register_duplicate_raises():
    with pytest.raises(DecoderError, match="already been registered"):
        register_decoder(RawFormat(2, False, True), decode_int16_interleaved)


def test_raw_format_str():
    assert str(RawFormat(2, False, True)) == "Int16Interleaved"
    assert str(RawFormat(4, True, False)) == "Float32NonInterleaved"


INT16_RAW = bytes([0x01, 0x02, 0x03, 0x04, 0x05, 0x06, 0x07, 0x08])
FLOAT32_RAW = bytes(range(1, 17))
PREFIX = {Endian.BIG: ">", Endian.LITTLE: "<"}


def _int16(endian, raw):
    return struct.unpack(PREFIX[endian] + "h", raw)[0]


def _float32(endian, raw):
    return struct.unpack(PREFIX[endian] + "f", raw)[0]


@pytest.mark.parametrize("endian", list(Endian))
def test_decode_int16_interleaved(endian):
    expected = Int16Interleaved(
        array("h", [_int16(endian, INT16_RAW[i:i + 2]) for i in range(0, 8, 2)]),
        ChunkInfo(length=2, channels=2),
    )
    assert decode_int16_interleaved(endian, INT16_RAW, 2) == expected


@pytest.mark.parametrize("endian", list(Endian))
def test_decode_int16_non_interleaved(endian):
    expected = Int16NonInterleaved(
        [
            array("h", [_int16(endian, INT16_RAW[0:2]), _int16(endian, INT16_RAW[2:4])]),
            array("h", [_int16(endian, INT16_RAW[4:6]), _int16(endian, INT16_RAW[6:8])]),
        ],
        ChunkInfo(length=2, channels=2),
    )
    assert decode_int16_non_interleaved(endian, INT16_RAW, 2) == expected


@pytest.mark.parametrize("endian", list(Endian))
def test_decode_float32_interleaved(endian):
    expected = Float32Interleaved(
        array("f", [_float32(endian, FLOAT32_RAW[i:i + 4]) for i in range(0, 16, 4)]),
        ChunkInfo(length=2, channels=2),
    )
    assert decode_float32_interleaved(endian, FLOAT32_RAW, 2) == expected


@pytest.mark.parametrize("endian", list(Endian))
def test_decode_float32_non_interleaved(endian):
    expected = Float32NonInterleaved(
        [
            array("f", [_float32(endian, FLOAT32_RAW[0:4]), _float32(endian, FLOAT32_RAW[4:8])]),
            array("f", [_float32(endian, FLOAT32_RAW[8:12]), _float32(endian, FLOAT32_RAW[12:16])]),
        ],
        ChunkInfo(length=2, channels=2),
    )
    assert decode_float32_non_interleaved(endian, FLOAT32_RAW, 2) == expected


def test_decode_big_endian_pinned_value():
    audio = decode_int16_interleaved(Endian.BIG, INT16_RAW, 2)
    assert list(audio.data) == [0x0102, 0x0304, 0x0506, 0x0708]


def test_decode_rejects_bad_chunk():
    with pytest.raises(DecoderError):
        decode_float32_interleaved(Endian.LITTLE, bytes(6), 1)


@pytest.mark.parametrize(
    "raw_format",
    [RawFormat(2, False, True), RawFormat(2, False, False), RawFormat(4, True, True), RawFormat(4, True, False)],
)
def test_decode_zero_chunk_is_silent(raw_format):
    audio = new_decoder(raw_format)(Endian.LITTLE, bytes(800), 2)
    size = 800 // (raw_format.sample_size * 2)
    assert audio.size == ChunkInfo(length=size, channels=2)
    assert all(audio.at(i, ch).to_int() == 0 for i in range(size) for ch in range(2))