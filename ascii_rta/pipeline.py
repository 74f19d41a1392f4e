"""Facade tying the audio stream, the producer and the consumer together."""

from __future__ import annotations

import threading
from typing import Optional

from ascii_rta.audio_file import DEFAULT_RESOURCES, pink_noise_samples, sine_wave_samples
from ascii_rta.consumer import AudioConsumer
from ascii_rta.handler import AudioHandler
from ascii_rta.producer import AudioProducer
from ascii_rta.settings import AUDIO_CHANNELS, SAMPLE_RATE, SAMPLE_SIZE, make_queue


class AudioPipeline:
    """Captures audio from the default input device and analyses it live.

    Any user interface reads the band levels and switches sources through
    this object; :meth:`close` stops the stream and the analysis thread.
    """

    def __init__(self, handler: Optional[AudioHandler] = None, resources=DEFAULT_RESOURCES) -> None:
        self._queue = make_queue()
        self._stop_flag = threading.Event()
        self._producer = AudioProducer(
            self._queue,
            self._stop_flag,
            sine_wave_samples(resources),
            pink_noise_samples(resources),
        )
        self._consumer = AudioConsumer(self._queue, self._stop_flag)
        self._stream = None
        try:
            audio_handler = handler if handler is not None else AudioHandler()
            self._stream = (
                audio_handler.build_stream()
                .input_device(audio_handler.default_input_device(), AUDIO_CHANNELS)
                .sample_rate(SAMPLE_RATE)
                .buffer_frames(SAMPLE_SIZE)
                .callback(self._producer)
                .auto_start()
                .build()
            )
        except BaseException:
            self._consumer.close()
            raise

    def octave_bands(self) -> tuple[float, ...]:
        """Return the latest level of each octave band, in dB."""
        return self._consumer.octave_bands()

    def set_mic(self, on: bool) -> None:
        """Switch the microphone input on or off."""
        self._producer.set_mic(on)

    def set_sine_wave(self, on: bool) -> None:
        """Switch the sine wave source on or off."""
        self._producer.set_sine_wave(on)

    def set_pink_noise(self, on: bool) -> None:
        """Switch the pink noise source on or off."""
        self._producer.set_pink_noise(on)

    def close(self) -> None:
        """Stop the stream and the analysis thread."""
        self._stop_flag.set()
        if self._stream is not None:
            self._stream.close()
            self._stream = None
        self._consumer.close()

    def __enter__(self) -> "AudioPipeline":
        return self

    def __exit__(self, *args) -> None:
        self.close()