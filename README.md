# mediadevices

Building blocks for handling captured media in Python. The package has no
dependencies outside the standard library.

## Modules

- **`mediadevices.wave`** – audio chunk containers `Int16Interleaved`,
  `Int16NonInterleaved`, `Float32Interleaved` and `Float32NonInterleaved`,
  each with `zeros(size)`, `at(i, ch)`, `set(i, ch, sample)`,
  `set_int16` / `set_float32`, `sub_audio(offset_samples, n_samples)` and a
  `sample_format` property. Sample types are `Int16Sample`, `Float32Sample`
  and `Int64Sample`, all with `to_int()`. `ChunkInfo` holds `length`,
  `channels` and `sampling_rate`. `INT16_SAMPLE_FORMAT` and
  `FLOAT32_SAMPLE_FORMAT` are `SampleFormat` objects whose `convert(sample)`
  turns any sample into their own type.
- **`mediadevices.decoder`** – functions that turn raw PCM bytes into audio
  containers in either byte order (`Endian.BIG`, `Endian.LITTLE`):
  `decode_int16_interleaved`, `decode_int16_non_interleaved`,
  `decode_float32_interleaved` and `decode_float32_non_interleaved`.
  `new_decoder(raw_format)` looks one up by `RawFormat(sample_size, is_float,
  interleaved)`. `register_decoder` adds a decoder for a new format; each
  format can be registered only once. `calculate_chunk_info` checks a raw
  chunk's length against its channel count and sample size.
- **`mediadevices.buffer`** – `Buffer`, which keeps an independent copy of
  an audio chunk through `store_copy(src)` and reuses its storage between
  copies. `load()` returns the copy, or `None` before anything was stored.
- **`mediadevices.mixer`** – `MonoMixer`, whose `mix(dst, src)` averages
  every source channel per sample and writes the mean to every destination
  channel.
- **`mediadevices.sampler`** – `video_sampler(clock_rate, clock)` counts the
  clock ticks elapsed since its previous call; `audio_sampler(clock_rate,
  latency)` always returns the ticks in a fixed latency (a `timedelta` or
  seconds).
- **`mediadevices.track`** – `BaseTrack`, which records an error with
  `on_error` and reports it once to a handler registered with `on_ended`
  (at once, if the error came first). Its `rtcp_read_loop(reader,
  key_frame_controller, stop)` reads RTCP packets until a
  `threading.Event` is set or the reader raises `EOFError`, and calls
  `force_key_frame()` for every picture loss indication or full intra
  request. `requests_key_frame(data)` tells whether a compound RTCP packet
  holds such a request. `RTPReadCloser` wraps read, close and controller
  functions and works as a context manager.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from mediadevices.decoder import Endian, RawFormat, new_decoder
from mediadevices.wave import Float32Interleaved, ChunkInfo
from mediadevices.mixer import MonoMixer

decode = new_decoder(RawFormat(sample_size=2, is_float=False, interleaved=True))
stereo = decode(Endian.LITTLE, bytes([0x00, 0x10, 0x00, 0x20]), 2)

mono = Float32Interleaved.zeros(ChunkInfo(length=stereo.size.length, channels=1))
MonoMixer().mix(mono, stereo)
print(mono.at(0, 0))  # Float32Sample(value=0.09375)
```

## Errors

Invalid input raises an exception: `DecoderError` for malformed raw chunks,
unknown formats and duplicate registrations; `MixError` when buffer lengths
do not match or the destination cannot be written; `UnsupportedFormatError`
when a `Buffer` is handed an audio type it cannot copy; `RTCPParseError`
from `requests_key_frame` for bytes that are not a valid RTCP packet.

## What this package does not do

It does not open cameras, microphones or screens, encode audio or video,
packetize encoded data into RTP, or attach tracks to a peer connection.
`BaseTrack` covers only error reporting and RTCP key frame requests; the
reader and key frame controller it works with are supplied by the caller.