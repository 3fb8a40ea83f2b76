"""Track state, RTP reader handles and RTCP feedback handling."""

from __future__ import annotations

import logging
import struct
import threading
from dataclasses import dataclass
from typing import Any, Callable, Iterator, List, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)

RTP_OUTBOUND_MTU = 1200
RTCP_INBOUND_MTU = 1500

_RTCP_VERSION = 2
_PAYLOAD_SPECIFIC_FEEDBACK = 206
_FMT_PICTURE_LOSS_INDICATION = 1
_FMT_FULL_INTRA_REQUEST = 4
_FEEDBACK_MIN_LENGTH = 12


class RTCPParseError(ValueError):
    """Raised when bytes do not form a valid RTCP compound packet."""


class RTCPReader(Protocol):
    """Source of raw RTCP packets; raises EOFError when exhausted."""

    def read(self, size: int) -> bytes:
        ...


class KeyFrameController(Protocol):
    """Encoder control that can be asked for a key frame."""

    def force_key_frame(self) -> None:
        ...


@dataclass
class RTPReadCloser:
    """Handle that reads packetized RTP data from an encoded source."""

    read_fn: Callable[[], Tuple[List[Any], Callable[[], None]]]
    close_fn: Callable[[], None]
    controller_fn: Callable[[], Any]

    def read(self) -> Tuple[List[Any], Callable[[], None]]:
        """Return the next packets and a function releasing them."""
        return self.read_fn()

    def close(self) -> None:
        self.close_fn()

    def controller(self) -> Any:
        """Return the encoder controller behind this reader."""
        return self.controller_fn()

    def __enter__(self) -> RTPReadCloser:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def _iter_packets(data: bytes) -> Iterator[Tuple[int, int, bytes]]:
    """Yield (format, packet type, raw packet) for every packet of a compound packet."""
    if not data:
        raise RTCPParseError("packet too short")
    offset = 0
    while offset < len(data):
        if len(data) - offset < 4:
            raise RTCPParseError("packet too short")
        first, packet_type, length = struct.unpack_from("!BBH", data, offset)
        if first >> 6 != _RTCP_VERSION:
            raise RTCPParseError("invalid packet version")
        size = (length + 1) * 4
        if offset + size > len(data):
            raise RTCPParseError("packet too short")
        yield first & 0x1F, packet_type, data[offset:offset + size]
        offset += size


def _key_frame_requests(data: bytes) -> int:
    """Count the picture loss indications and full intra requests in ``data``."""
    count = 0
    for fmt, packet_type, packet in list(_iter_packets(bytes(data))):
        if packet_type != _PAYLOAD_SPECIFIC_FEEDBACK:
            continue
        if fmt not in (_FMT_PICTURE_LOSS_INDICATION, _FMT_FULL_INTRA_REQUEST):
            continue
        if len(packet) < _FEEDBACK_MIN_LENGTH:
            raise RTCPParseError("packet too short")
        count += 1
    return count


def requests_key_frame(data: bytes) -> bool:
    """Tell whether an RTCP compound packet asks the sender for a key frame."""
    return _key_frame_requests(data) > 0


class BaseTrack:
    """Error reporting and RTCP handling shared by media tracks."""

    def __init__(self, source: Any = None) -> None:
        self.source = source
        self._lock = threading.Lock()
        self._error: Optional[BaseException] = None
        self._handler: Optional[Callable[[BaseException], None]] = None
        self._ended = False

    def _end(self, handler: Callable[[BaseException], None], err: BaseException) -> None:
        with self._lock:
            if self._ended:
                return
            self._ended = True
        handler(err)

    def on_ended(self, handler: Optional[Callable[[BaseException], None]]) -> None:
        """Register ``handler``; it runs at once if the track has already failed."""
        with self._lock:
            self._handler = handler
            err = self._error
        if err is not None and handler is not None:
            self._end(handler, err)

    def on_error(self, err: BaseException) -> None:
        """Record ``err`` and notify the registered handler, at most once per track."""
        with self._lock:
            self._error = err
            handler = self._handler
        if handler is not None:
            self._end(handler, err)

    def rtcp_read_loop(
        self,
        reader: RTCPReader,
        key_frame_controller: KeyFrameController,
        stop: threading.Event,
    ) -> None:
        """Read RTCP until ``stop`` is set or the reader ends, forcing key frames on request."""
        while not stop.is_set():
            try:
                data = reader.read(RTCP_INBOUND_MTU)
            except EOFError:
                return
            except Exception as exc:
                logger.warning("failed to read rtcp packet: %s", exc)
                continue

            try:
                requests = _key_frame_requests(data)
            except RTCPParseError as exc:
                logger.warning("failed to unmarshal rtcp packet: %s", exc)
                continue

            for _ in range(requests):
                try:
                    key_frame_controller.force_key_frame()
                except Exception as exc:
                    logger.warning("failed to force key frame: %s", exc)
                    break