"""Reading WAV files as interleaved 32-bit float samples."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from pathlib import Path

import numpy as np

SINE_WAVE_FILE = "1000.wav"
PINK_NOISE_FILE = "pink_mono.wav"
DEFAULT_RESOURCES = Path("resources")

_FORMAT_PCM = 0x0001
_FORMAT_FLOAT = 0x0003
_FORMAT_EXTENSIBLE = 0xFFFE


class _WavError(Exception):
    """Raised internally when a file is not a usable WAV file."""


@dataclass(frozen=True)
class _Format:
    tag: int
    channels: int
    sample_rate: int
    block_align: int
    bits: int

    @property
    def sample_width(self) -> int:
        if self.block_align and self.block_align % self.channels == 0:
            return self.block_align // self.channels
        return self.bits // 8


def _parse_fmt(body: bytes) -> _Format:
    if len(body) < 16:
        raise _WavError("fmt chunk too short")
    tag, channels, rate, _byte_rate, block_align, bits = struct.unpack_from("<HHIIHH", body)
    if tag == _FORMAT_EXTENSIBLE:
        if len(body) < 26:
            raise _WavError("extensible fmt chunk too short")
        (tag,) = struct.unpack_from("<H", body, 24)
    if channels == 0:
        raise _WavError("no channels")
    return _Format(tag, channels, rate, block_align, bits)


def _chunks(data: bytes):
    pos = 12
    while pos + 8 <= len(data):
        chunk_id = data[pos:pos + 4]
        (size,) = struct.unpack_from("<I", data, pos + 4)
        yield chunk_id, data[pos + 8:pos + 8 + size]
        pos += 8 + size + (size & 1)


def _decode_pcm(payload: bytes, width: int) -> np.ndarray:
    if width == 1:
        raw = np.frombuffer(payload, dtype=np.uint8).astype(np.float32)
        return (raw - 128.0) / 128.0
    if width == 2:
        return np.frombuffer(payload, dtype="<i2").astype(np.float32) / 32768.0
    if width == 3:
        raw = np.frombuffer(payload, dtype=np.uint8).reshape(-1, 3).astype(np.int32)
        values = raw[:, 0] | (raw[:, 1] << 8) | (raw[:, 2] << 16)
        values = np.where(values & 0x800000, values - 0x1000000, values)
        return (values / 8388608.0).astype(np.float32)
    if width == 4:
        return (np.frombuffer(payload, dtype="<i4").astype(np.float64) / 2147483648.0).astype(
            np.float32
        )
    raise _WavError(f"unsupported PCM sample width {width}")


def _decode_float(payload: bytes, width: int) -> np.ndarray:
    if width == 4:
        return np.frombuffer(payload, dtype="<f4").astype(np.float32)
    if width == 8:
        return np.frombuffer(payload, dtype="<f8").astype(np.float32)
    raise _WavError(f"unsupported float sample width {width}")


def _decode(data: bytes) -> np.ndarray:
    if len(data) < 12 or data[:4] != b"RIFF" or data[8:12] != b"WAVE":
        raise _WavError("not a RIFF/WAVE file")

    fmt = None
    payload = None
    for chunk_id, body in _chunks(data):
        if chunk_id == b"fmt ":
            fmt = _parse_fmt(body)
        elif chunk_id == b"data":
            payload = body
    if fmt is None or payload is None:
        raise _WavError("missing fmt or data chunk")

    width = fmt.sample_width
    if width <= 0:
        raise _WavError("invalid sample width")
    frame_bytes = width * fmt.channels
    payload = payload[:len(payload) - len(payload) % frame_bytes]

    if fmt.tag == _FORMAT_PCM:
        return _decode_pcm(payload, width)
    if fmt.tag == _FORMAT_FLOAT:
        return _decode_float(payload, width)
    raise _WavError(f"unsupported format tag {fmt.tag:#06x}")


def read_wav_samples(path) -> np.ndarray:
    """Return every sample of a WAV file, channels interleaved, as float32 in [-1, 1].

    A file that cannot be opened or decoded gives an empty array.
    """
    try:
        data = Path(path).read_bytes()
        return _decode(data)
    except (OSError, _WavError, struct.error, ValueError):
        return np.zeros(0, dtype=np.float32)


def sine_wave_samples(resources=DEFAULT_RESOURCES) -> np.ndarray:
    """Return the samples of the 1 kHz sine recording in ``resources``."""
    return read_wav_samples(Path(resources) / SINE_WAVE_FILE)


def pink_noise_samples(resources=DEFAULT_RESOURCES) -> np.ndarray:
    """Return the samples of the mono pink noise recording in ``resources``."""
    return read_wav_samples(Path(resources) / PINK_NOISE_FILE)