"""Background analysis of the frames produced by the audio stream."""

from __future__ import annotations

import queue as queue_module
import threading

from ascii_rta.analyzer import BAND_COUNT, Analyzer
from ascii_rta.settings import SAMPLE_RATE

_POLL_INTERVAL = 0.005


class AudioConsumer:
    """Analyses queued frames on its own thread and keeps the latest band levels.

    The thread runs until the shared stop flag is set; :meth:`close` sets it
    and waits for the thread to finish.
    """

    def __init__(self, queue: queue_module.Queue, stop_flag: threading.Event) -> None:
        self._queue = queue
        self._stop_flag = stop_flag
        self._lock = threading.Lock()
        self._bands: tuple[float, ...] = (0.0,) * BAND_COUNT
        self._thread = threading.Thread(target=self._run, name="audio-consumer", daemon=True)
        self._thread.start()

    def octave_bands(self) -> tuple[float, ...]:
        """Return the latest level of each octave band, in dB."""
        with self._lock:
            return self._bands

    def _drain(self):
        while True:
            try:
                yield self._queue.get_nowait()
            except queue_module.Empty:
                return

    def _run(self) -> None:
        analyzer = Analyzer(SAMPLE_RATE)
        while not self._stop_flag.is_set():
            for frame in self._drain():
                analyzer.process_samples(frame)
                bands = analyzer.octave_bands()
                with self._lock:
                    self._bands = bands
            self._stop_flag.wait(_POLL_INTERVAL)

    def close(self) -> None:
        """Set the stop flag and wait for the analysis thread to end."""
        self._stop_flag.set()
        if self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join()

    def __enter__(self) -> "AudioConsumer":
        return self

    def __exit__(self, *args) -> None:
        self.close()