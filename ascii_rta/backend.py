"""Audio device backends that streams are opened on."""

from __future__ import annotations

import abc
import enum
import os
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from ascii_rta.devices import DeviceInfo

#: Native format bit for 32-bit float samples.
FORMAT_FLOAT32 = 0x10

#: Rates offered by backends that resample internally.
COMMON_SAMPLE_RATES = (8000, 11025, 16000, 22050, 32000, 44100, 48000, 88200, 96000, 176400, 192000)

#: ``callback(output, input, frame_count, stream_time, status) -> int``; a
#: non-zero result asks the backend to stop calling it.
Callback = Callable[[Optional[np.ndarray], Optional[np.ndarray], int, float, int], int]

_MAX_DEVICE_CHANNELS = 2


class StreamFlags(enum.IntFlag):
    """Options that can be requested when a stream is opened."""

    NONE = 0
    NONINTERLEAVED = 0x1
    MINIMIZE_LATENCY = 0x2
    HOG_DEVICE = 0x4
    SCHEDULE_REALTIME = 0x8
    ALSA_USE_DEFAULT = 0x10


@dataclass
class StreamOptions:
    """Stream tuning requested from the backend."""

    flags: StreamFlags = StreamFlags.NONE
    number_of_buffers: int = 2


@dataclass(frozen=True)
class StreamParameters:
    """One direction of a stream: which device and how many channels."""

    device_id: int
    channels: int
    first_channel: int = 0


class AudioBackend(abc.ABC):
    """Interface to an audio system able to run one stream at a time.

    Sample buffers handed to the callback are interleaved float32 arrays of
    ``frame_count * channels`` values; the output one is to be filled in place.
    Failures are reported as :class:`RuntimeError` carrying the backend's text.
    """

    @abc.abstractmethod
    def device_ids(self) -> list[int]:
        """Return the identifiers of every device."""

    @abc.abstractmethod
    def device_info(self, device_id: int) -> DeviceInfo:
        """Return the description of one device."""

    @abc.abstractmethod
    def default_input_device(self) -> int:
        """Return the identifier of the default capture device."""

    @abc.abstractmethod
    def default_output_device(self) -> int:
        """Return the identifier of the default playback device."""

    @abc.abstractmethod
    def open_stream(self, output, input, sample_rate, buffer_frames, callback, options=None) -> int:
        """Open a stream and return the buffer size, in frames, actually granted."""

    @abc.abstractmethod
    def start_stream(self) -> None:
        """Start calling the callback of the open stream."""

    @abc.abstractmethod
    def stop_stream(self) -> None:
        """Stop the running stream."""

    @abc.abstractmethod
    def close_stream(self) -> None:
        """Close the open stream, stopping it first if needed."""

    @abc.abstractmethod
    def is_stream_open(self) -> bool:
        """Tell whether a stream is open."""

    @abc.abstractmethod
    def is_stream_running(self) -> bool:
        """Tell whether the open stream is running."""


class PygameBackend(AudioBackend):
    """Backend built on the SDL audio devices exposed by pygame.

    Capture devices are numbered first, then playback devices. SDL converts
    sample rates itself, so every common rate is reported as supported.
    Stream flags have no SDL counterpart and are accepted without effect;
    the number of buffers bounds the capture frames held for a duplex stream.
    """

    def __init__(self) -> None:
        os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
        import pygame
        from pygame._sdl2 import audio as sdl_audio

        pygame.init()
        self._sdl = sdl_audio
        self._sdl_error = pygame.error
        capture = [str(name) for name in sdl_audio.get_audio_device_names(True)]
        playback = [str(name) for name in sdl_audio.get_audio_device_names(False)]
        self._entries: list[tuple[str, bool]] = [(name, True) for name in capture]
        self._entries += [(name, False) for name in playback]
        self._default_input = 0 if capture else None
        self._default_output = len(capture) if playback else None

        self._capture = None
        self._playback = None
        self._callback: Callback | None = None
        self._in_channels = 0
        self._out_channels = 0
        self._pending: deque = deque(maxlen=2)
        self._running = False
        self._halted = False
        self._started_at = 0.0

    def _entry(self, device_id: int) -> tuple[str, bool]:
        if not 0 <= device_id < len(self._entries):
            raise RuntimeError(f"invalid device ID {device_id}")
        return self._entries[device_id]

    def device_ids(self) -> list[int]:
        return list(range(len(self._entries)))

    def device_info(self, device_id: int) -> DeviceInfo:
        name, is_capture = self._entry(device_id)
        return DeviceInfo(
            id=device_id,
            name=name,
            output_channels=0 if is_capture else _MAX_DEVICE_CHANNELS,
            input_channels=_MAX_DEVICE_CHANNELS if is_capture else 0,
            duplex_channels=0,
            is_default_output=device_id == self._default_output,
            is_default_input=device_id == self._default_input,
            sample_rates=COMMON_SAMPLE_RATES,
            current_sample_rate=0,
            native_formats=FORMAT_FLOAT32,
        )

    def default_input_device(self) -> int:
        if self._default_input is None:
            raise RuntimeError("no capture device available")
        return self._default_input

    def default_output_device(self) -> int:
        if self._default_output is None:
            raise RuntimeError("no playback device available")
        return self._default_output

    def _device_name(self, device_id: int, capture: bool) -> str:
        name, is_capture = self._entry(device_id)
        if is_capture != capture:
            action = "capture" if capture else "play"
            raise RuntimeError(f"device {device_id} cannot {action} audio")
        return name

    def _open_device(self, name, capture, sample_rate, channels, frames, handler):
        return self._sdl.AudioDevice(
            name, capture, sample_rate, self._sdl.AUDIO_F32, channels, frames, 0, handler
        )

    def open_stream(self, output, input, sample_rate, buffer_frames, callback, options=None) -> int:
        if self.is_stream_open():
            raise RuntimeError("a stream is already open")
        if output is None and input is None:
            raise RuntimeError("a stream needs an input or an output")
        options = options if options is not None else StreamOptions()

        input_name = self._device_name(input.device_id, True) if input is not None else None
        output_name = self._device_name(output.device_id, False) if output is not None else None

        self._callback = callback
        self._in_channels = input.channels if input is not None else 0
        self._out_channels = output.channels if output is not None else 0
        self._pending = deque(maxlen=max(1, options.number_of_buffers))
        self._running = False
        self._halted = False
        try:
            if input_name is not None:
                self._capture = self._open_device(
                    input_name, True, sample_rate, input.channels, buffer_frames, self._on_capture
                )
            if output_name is not None:
                self._playback = self._open_device(
                    output_name, False, sample_rate, output.channels, buffer_frames, self._on_playback
                )
        except self._sdl_error as exc:
            self._close_devices()
            raise RuntimeError(str(exc)) from exc

        granted = self._playback if self._playback is not None else self._capture
        return int(granted.chunksize)

    def _devices(self):
        return [device for device in (self._capture, self._playback) if device is not None]

    def _close_devices(self) -> None:
        for device in self._devices():
            device.close()
        self._capture = None
        self._playback = None
        self._running = False
        self._pending.clear()

    def start_stream(self) -> None:
        if not self.is_stream_open():
            raise RuntimeError("no stream is open")
        if self._running and not self._halted:
            return
        self._halted = False
        self._started_at = time.monotonic()
        self._running = True
        for device in self._devices():
            device.pause(0)

    def stop_stream(self) -> None:
        if not self._running:
            return
        for device in self._devices():
            device.pause(1)
        self._running = False

    def close_stream(self) -> None:
        self.stop_stream()
        self._close_devices()
        self._callback = None

    def is_stream_open(self) -> bool:
        return bool(self._devices())

    def is_stream_running(self) -> bool:
        return self._running and not self._halted

    def _dispatch(self, output, input, frames: int) -> None:
        stream_time = time.monotonic() - self._started_at
        if self._callback(output, input, frames, stream_time, 0):
            self._halted = True

    def _on_capture(self, _device, memory) -> None:
        if not self.is_stream_running():
            return
        samples = np.frombuffer(bytes(memory), dtype=np.float32).copy()
        if self._playback is not None:
            self._pending.append(samples)
            return
        self._dispatch(None, samples, samples.size // max(1, self._in_channels))

    def _on_playback(self, _device, memory) -> None:
        out = np.zeros(memory.nbytes // 4, dtype=np.float32)
        if self.is_stream_running():
            frames = out.size // max(1, self._out_channels)
            captured = None
            if self._capture is not None:
                captured = np.zeros(frames * self._in_channels, dtype=np.float32)
                if self._pending:
                    latest = self._pending.popleft()
                    count = min(latest.size, captured.size)
                    captured[:count] = latest[:count]
            self._dispatch(out, captured, frames)
        memory[: out.nbytes] = out.tobytes()