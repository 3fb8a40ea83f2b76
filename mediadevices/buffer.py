"""A reusable store that keeps a private copy of the latest audio chunk."""

from __future__ import annotations

from array import array
from dataclasses import replace
from typing import Dict, List, Optional, Union

from mediadevices.wave import (
    Float32Interleaved,
    Float32NonInterleaved,
    Int16Interleaved,
    Int16NonInterleaved,
)

Audio = Union[Int16Interleaved, Int16NonInterleaved, Float32Interleaved, Float32NonInterleaved]

_INTERLEAVED_TYPECODES = {Int16Interleaved: "h", Float32Interleaved: "f"}
_NON_INTERLEAVED_TYPECODES = {Int16NonInterleaved: "h", Float32NonInterleaved: "f"}


class UnsupportedFormatError(TypeError):
    """Raised when a buffer is given audio in a format it cannot store."""


def _refill(target: array, values, typecode: str) -> None:
    """Replace the contents of ``target`` with ``values`` in place."""
    if not (isinstance(values, array) and values.typecode == typecode):
        values = array(typecode, values)
    target[:] = values


class Buffer:
    """Holds a copy of one audio chunk, reusing its storage between copies."""

    def __init__(self) -> None:
        self._interleaved: Dict[type, array] = {}
        self._non_interleaved: Dict[type, List[array]] = {}
        self._current: Optional[Audio] = None

    def load(self) -> Optional[Audio]:
        """Return the audio currently held, or None if nothing was stored yet."""
        return self._current

    def store_copy(self, src: Audio) -> None:
        """Store a copy of ``src``, reusing memory from earlier copies where possible."""
        kind = type(src)
        if kind in _INTERLEAVED_TYPECODES:
            typecode = _INTERLEAVED_TYPECODES[kind]
            storage = self._interleaved.setdefault(kind, array(typecode))
            _refill(storage, src.data, typecode)
            data = storage
        elif kind in _NON_INTERLEAVED_TYPECODES:
            typecode = _NON_INTERLEAVED_TYPECODES[kind]
            channels = self._non_interleaved.setdefault(kind, [])
            needed = len(src.data)
            del channels[needed:]
            channels.extend(array(typecode) for _ in range(needed - len(channels)))
            for target, values in zip(channels, src.data):
                _refill(target, values, typecode)
            data = channels
        else:
            raise UnsupportedFormatError("Unsupported format")

        clone = self._current
        if type(clone) is kind:
            clone.data = data
            clone.size = replace(src.size)
        else:
            clone = kind(data, replace(src.size))
        self._current = clone