"""Octave-band level analysis using Butterworth band-pass filters."""

from __future__ import annotations

import math

import numpy as np
from scipy import signal

BAND_COUNT = 10
OCTAVE_FREQUENCIES = (31.5, 63.0, 125.0, 250.0, 500.0, 1000.0, 2000.0, 4000.0, 8000.0, 16000.0)
FILTER_ORDER = 4
DEFAULT_SAMPLE_RATE = 44100

# Added to the RMS value so that silence does not hit log10(0).
_RMS_FLOOR = 1e-10
# Keeps band edges strictly inside (0, Nyquist).
_EDGE_MARGIN = 1e-8


class Analyzer:
    """Measures the level, in dB, of a signal in each octave band.

    Filters keep their state between calls, so consecutive blocks are
    treated as one continuous signal.
    """

    def __init__(self, sample_rate: int = DEFAULT_SAMPLE_RATE) -> None:
        if sample_rate <= 0:
            raise ValueError(f"sample rate must be positive, got {sample_rate}")
        self.sample_rate = sample_rate
        self._filters = [self._design(center) for center in OCTAVE_FREQUENCIES]
        self._states = [np.zeros((sos.shape[0], 2)) for sos in self._filters]
        self._bands = np.zeros(BAND_COUNT, dtype=np.float32)

    def _design(self, center: float) -> np.ndarray:
        nyquist = self.sample_rate / 2.0
        bandwidth = center / math.sqrt(2.0)
        low = max(center - bandwidth / 2.0, nyquist * _EDGE_MARGIN)
        high = min(center + bandwidth / 2.0, nyquist * (1.0 - _EDGE_MARGIN))
        if low >= high:
            raise ValueError(
                f"band centred on {center} Hz does not fit below Nyquist at {self.sample_rate} Hz"
            )
        return signal.butter(
            FILTER_ORDER, [low, high], btype="bandpass", fs=self.sample_rate, output="sos"
        )

    def process_samples(self, samples) -> None:
        """Filter a block of mono samples and update the band levels."""
        data = np.asarray(samples, dtype=np.float32).astype(np.float64).ravel()
        if data.size == 0:
            raise ValueError("cannot analyse an empty block of samples")

        for index, sos in enumerate(self._filters):
            filtered, self._states[index] = signal.sosfilt(sos, data, zi=self._states[index])
            rms = math.sqrt(float(np.mean(filtered * filtered)))
            self._bands[index] = 20.0 * math.log10(rms + _RMS_FLOOR)

    def octave_bands(self) -> tuple[float, ...]:
        """Return the latest level of each band, in dB, lowest band first."""
        return tuple(float(value) for value in self._bands)