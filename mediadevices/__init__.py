"""Audio containers, raw PCM decoding, buffering, mixing, RTP samplers and track helpers."""

__version__ = "0.1.0"
__all__ = ["buffer", "decoder", "mixer", "sampler", "track", "wave"]