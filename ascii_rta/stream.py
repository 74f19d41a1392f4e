"""Opening, starting and closing audio streams."""

from __future__ import annotations

import abc
from dataclasses import dataclass, field, replace
from typing import Callable, Optional

import numpy as np

from ascii_rta.backend import AudioBackend, StreamFlags, StreamOptions, StreamParameters
from ascii_rta.devices import DeviceHandler


class StreamError(RuntimeError):
    """Raised when a stream cannot be opened or started."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Stream Exception: {message}")


class CallbackHandler(abc.ABC):
    """Base for stream callbacks working on interleaved float32 samples."""

    def __init__(self, channel_count: int = 1) -> None:
        self.channel_count = channel_count

    def __call__(self, output, input, frame_count, stream_time, status) -> int:
        return self.process(output, input, frame_count, stream_time, status)

    @abc.abstractmethod
    def process(self, output, input, frame_count, stream_time, status) -> int:
        """Handle one buffer; return non-zero to stop the stream."""

    def sample_byte_size(self) -> int:
        """Return the size in bytes of one frame across all channels."""
        return np.dtype(np.float32).itemsize * self.channel_count


def _silent_callback(output, input, frame_count, stream_time, status) -> int:
    """Default callback: writes silence to any output buffer and keeps running."""
    if output is not None:
        output[...] = 0
    return 0


@dataclass
class _StreamSettings:
    output_device: Optional[DeviceHandler] = None
    output_channels: int = 0
    input_device: Optional[DeviceHandler] = None
    input_channels: int = 0
    sample_rate: int = 44100
    buffer_frames: int = 512
    options: StreamOptions = field(default_factory=StreamOptions)
    callback: Callable = _silent_callback
    auto_start: bool = False


def _stream_parameters(device: Optional[DeviceHandler], channels: int, sample_rate: int):
    if device is None:
        return None
    if not device.supports(sample_rate):
        raise StreamError(f"Device[{device.id()}] does not support sample rate {sample_rate}")
    return StreamParameters(device.id(), channels)


class StreamHandler:
    """An open stream, closed by :meth:`close` or on leaving a ``with`` block."""

    def __init__(self, builder: "StreamBuilder") -> None:
        settings = builder._settings
        self._backend: AudioBackend = builder._backend
        self._sample_rate = settings.sample_rate
        self._output = _stream_parameters(
            settings.output_device, settings.output_channels, settings.sample_rate
        )
        self._input = _stream_parameters(
            settings.input_device, settings.input_channels, settings.sample_rate
        )
        self._buffer_frames = settings.buffer_frames
        self._options = replace(settings.options)
        self._callback = settings.callback

        self._open()
        if settings.auto_start:
            try:
                self._start()
            except StreamError:
                self.close()
                raise

    @property
    def buffer_frames(self) -> int:
        """Buffer size, in frames, the stream runs with."""
        return self._buffer_frames

    def _open(self) -> None:
        desired = self._buffer_frames
        try:
            granted = self._backend.open_stream(
                self._output, self._input, self._sample_rate, desired, self._callback, self._options
            )
        except RuntimeError as exc:
            raise StreamError(str(exc)) from exc
        if granted != desired:
            self._backend.close_stream()
            raise StreamError(f"Buffer frame value changed: {desired} -> {granted}")
        self._buffer_frames = granted

    def _start(self) -> None:
        try:
            self._backend.start_stream()
        except RuntimeError as exc:
            raise StreamError(str(exc)) from exc

    def start(self) -> None:
        """Start the stream unless it is already running."""
        if self._backend.is_stream_running():
            return
        self._start()

    def stop(self) -> None:
        """Stop the stream if it is running."""
        if self._backend.is_stream_running():
            self._backend.stop_stream()

    def close(self) -> None:
        """Stop the stream and release it."""
        self.stop()
        if self._backend.is_stream_open():
            self._backend.close_stream()

    def __enter__(self) -> "StreamHandler":
        return self

    def __exit__(self, *args) -> None:
        self.close()


class StreamBuilder:
    """Collects stream settings step by step; :meth:`build` opens the stream."""

    def __init__(self, backend: AudioBackend) -> None:
        self._backend = backend
        self._settings = _StreamSettings()

    def input_device(self, device: DeviceHandler, channels: int) -> "StreamBuilder":
        self._settings.input_device = device
        self._settings.input_channels = channels
        return self

    def output_device(self, device: DeviceHandler, channels: int) -> "StreamBuilder":
        self._settings.output_device = device
        self._settings.output_channels = channels
        return self

    def sample_rate(self, rate: int) -> "StreamBuilder":
        self._settings.sample_rate = rate
        return self

    def buffer_frames(self, frames: int) -> "StreamBuilder":
        self._settings.buffer_frames = frames
        return self

    def callback(self, callback: Callable) -> "StreamBuilder":
        self._settings.callback = callback
        return self

    def auto_start(self) -> "StreamBuilder":
        self._settings.auto_start = True
        return self

    def _flag(self, flag: StreamFlags) -> "StreamBuilder":
        self._settings.options.flags |= flag
        return self

    def non_interleaved(self) -> "StreamBuilder":
        return self._flag(StreamFlags.NONINTERLEAVED)

    def minimize_latency(self) -> "StreamBuilder":
        return self._flag(StreamFlags.MINIMIZE_LATENCY)

    def hog_device(self) -> "StreamBuilder":
        return self._flag(StreamFlags.HOG_DEVICE)

    def schedule_realtime(self) -> "StreamBuilder":
        return self._flag(StreamFlags.SCHEDULE_REALTIME)

    def alsa_use_default(self) -> "StreamBuilder":
        return self._flag(StreamFlags.ALSA_USE_DEFAULT)

    def number_of_buffers(self, count: int) -> "StreamBuilder":
        self._settings.options.number_of_buffers = count
        return self

    def build(self) -> StreamHandler:
        """Open a stream with the collected settings."""
        return StreamHandler(self)