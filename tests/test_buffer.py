from array import array

import pytest

from mediadevices.buffer import Buffer, UnsupportedFormatError
from mediadevices.wave import (
    ChunkInfo,
    Float32Interleaved,
    Float32NonInterleaved,
    Float32Sample,
    Int16Interleaved,
    Int16NonInterleaved,
    Int16Sample,
)

CHUNK = ChunkInfo(length=4, channels=2, sampling_rate=48000)

CASES = [
    (Float32Interleaved, lambda audio: audio.set(0, 0, Float32Sample(1))),
    (Float32NonInterleaved, lambda audio: audio.set(0, 0, Float32Sample(1))),
    (Int16Interleaved, lambda audio: audio.set(1, 1, Int16Sample(2))),
    (Int16NonInterleaved, lambda audio: audio.set(1, 1, Int16Sample(2))),
]


def _assert_separate_memory(original, clone):
    assert clone.data is not original.data
    if isinstance(original.data, list):
        for original_channel, clone_channel in zip(original.data, clone.data):
            assert clone_channel is not original_channel


def test_store_copy_and_load_across_formats():
    buffer = Buffer()
    for kind, update in CASES:
        src = kind.zeros(CHUNK)
        src.set(0, 0, Int16Sample(1))
        buffer.store_copy(src)

        _assert_separate_memory(src, buffer.load())
        assert buffer.load() == src

        update(src)
        buffer.store_copy(src)
        assert buffer.load() == src


@pytest.mark.parametrize("kind", [case[0] for case in CASES])
def test_copy_is_independent_of_source(kind):
    buffer = Buffer()
    src = kind.zeros(CHUNK)
    src.set(0, 0, Int16Sample(1))
    buffer.store_copy(src)
    expected = buffer.load().at(0, 0)

    src.set(0, 0, Int16Sample(5))

    assert buffer.load().at(0, 0) == expected
    assert buffer.load().at(0, 0) != src.at(0, 0)


def test_same_format_reuses_container():
    buffer = Buffer()
    src = Int16Interleaved.zeros(CHUNK)
    buffer.store_copy(src)
    first = buffer.load()
    first_data = first.data

    src.set(2, 1, Int16Sample(7))
    buffer.store_copy(src)

    assert buffer.load() is first
    assert buffer.load().data is first_data
    assert buffer.load() == src


def test_smaller_chunk_after_larger_chunk():
    buffer = Buffer()
    buffer.store_copy(Int16NonInterleaved.zeros(CHUNK))
    smaller = Int16NonInterleaved(
        [array("h", [1, 2]), array("h", [3, 4])],
        ChunkInfo(length=2, channels=2, sampling_rate=48000),
    )
    buffer.store_copy(smaller)
    assert buffer.load() == smaller


def test_load_before_store_is_empty():
    assert Buffer().load() is None


def test_unsupported_format():
    with pytest.raises(UnsupportedFormatError):
        Buffer().store_copy(object())