"""Stream callback that mixes the active sources into audio frames."""

from __future__ import annotations

import queue as queue_module
import threading

import numpy as np

from ascii_rta.settings import AUDIO_CHANNELS, SAMPLE_SIZE
from ascii_rta.stream import CallbackHandler


class _Loop:
    """Endless playback of a recorded buffer, one block at a time."""

    def __init__(self, label: str, samples) -> None:
        self._label = label
        self._samples = np.asarray(samples, dtype=np.float32).ravel()
        self._cursor = 0

    def take(self, count: int) -> np.ndarray:
        size = self._samples.size
        if size == 0:
            raise RuntimeError(f"{self._label} buffer is empty!")
        indices = (self._cursor + 1 + np.arange(count)) % size
        self._cursor = int(indices[-1])
        return self._samples[indices]


class AudioProducer(CallbackHandler):
    """Turns each captured buffer into a frame and hands it to the consumer.

    The frame is the average of the sources that are switched on: the
    microphone input, a looped sine recording and a looped pink noise
    recording. With every source off, a silent frame is queued.
    """

    def __init__(
        self,
        queue: queue_module.Queue,
        stop_flag: threading.Event,
        sine_wave=(),
        pink_noise=(),
    ) -> None:
        super().__init__(AUDIO_CHANNELS)
        self._queue = queue
        self._stop_flag = stop_flag
        self._sine_wave = _Loop("Sine wave", sine_wave)
        self._pink_noise = _Loop("Pink noise", pink_noise)
        self._mic_on = False
        self._sine_wave_on = False
        self._pink_noise_on = False

    def set_mic(self, on: bool) -> None:
        """Switch the microphone input on or off."""
        self._mic_on = bool(on)

    def set_sine_wave(self, on: bool) -> None:
        """Switch the sine wave source on or off."""
        self._sine_wave_on = bool(on)

    def set_pink_noise(self, on: bool) -> None:
        """Switch the pink noise source on or off."""
        self._pink_noise_on = bool(on)

    def process(self, output, input, frame_count, stream_time, status) -> int:
        """Queue one frame; return 1 to stop the stream, 0 to go on."""
        if self._stop_flag.is_set():
            return 1
        if input is None:
            return 0
        if frame_count != SAMPLE_SIZE:
            return 1
        try:
            self._queue.put_nowait(self._compute_frame(input))
        except queue_module.Full:
            pass
        return 0

    def _compute_frame(self, input) -> np.ndarray:
        mic_on = self._mic_on
        sine_wave_on = self._sine_wave_on
        pink_noise_on = self._pink_noise_on
        source_count = mic_on + sine_wave_on + pink_noise_on

        frame = np.zeros(SAMPLE_SIZE, dtype=np.float32)
        if source_count == 0:
            return frame
        if mic_on:
            frame += np.asarray(input, dtype=np.float32).ravel()[:SAMPLE_SIZE]
        if sine_wave_on:
            frame += self._sine_wave.take(SAMPLE_SIZE)
        if pink_noise_on:
            frame += self._pink_noise.take(SAMPLE_SIZE)
        return (frame / np.float32(source_count)).astype(np.float32)