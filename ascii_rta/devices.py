"""Description of audio devices and their capabilities."""

from __future__ import annotations

import sys
from dataclasses import dataclass


@dataclass(frozen=True)
class DeviceInfo:
    """What a backend reports about one audio device."""

    id: int
    name: str
    output_channels: int = 0
    input_channels: int = 0
    duplex_channels: int = 0
    is_default_output: bool = False
    is_default_input: bool = False
    sample_rates: tuple[int, ...] = ()
    current_sample_rate: int = 0
    native_formats: int = 0


class DeviceHandler:
    """Read-only view of an audio device."""

    def __init__(self, info: DeviceInfo) -> None:
        self._info = info

    @property
    def info(self) -> DeviceInfo:
        """The device description this handler wraps."""
        return self._info

    def id(self) -> int:
        """Return the backend identifier of the device."""
        return self._info.id

    def supports(self, rate: int) -> bool:
        """Tell whether the device can run at the given sample rate."""
        return rate in self._info.sample_rates

    def describe(self) -> str:
        """Return a multi-line, human readable summary of the device."""
        info = self._info
        rates = ", ".join(str(rate) for rate in info.sample_rates)
        default_output = "YES" if info.is_default_output else "NO"
        default_input = "YES" if info.is_default_input else "NO"
        return (
            f"Device: {info.name} [{info.id}] "
            f"(Default Output:{default_output} "
            f"Input:{default_input})\n"
            f" Max channels: [output:{info.output_channels}, "
            f"input:{info.input_channels}, duplex:{info.duplex_channels}]\n"
            f" Supported sample rates: [{rates}]\n"
            f" Current sample rate: {info.current_sample_rate}\n"
            f"Supported formats: {info.native_formats}\n"
        )

    def print_info(self) -> str:
        """Write the summary given by :meth:`describe` to stdout and return it."""
        text = self.describe()
        sys.stdout.write(text)
        sys.stdout.flush()
        return text