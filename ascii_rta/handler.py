"""Entry point to the audio system: devices and streams."""

from __future__ import annotations

from typing import Optional

from ascii_rta.backend import AudioBackend, PygameBackend
from ascii_rta.devices import DeviceHandler
from ascii_rta.stream import StreamBuilder


class AudioHandler:
    """Gives access to the devices of a backend and builds streams on it."""

    def __init__(self, backend: Optional[AudioBackend] = None) -> None:
        self._backend = backend if backend is not None else PygameBackend()
        if not self._backend.device_ids():
            raise RuntimeError("No audio devices found!")

    @property
    def backend(self) -> AudioBackend:
        """The backend streams are opened on."""
        return self._backend

    def default_input_device(self) -> DeviceHandler:
        """Return the default capture device."""
        return DeviceHandler(self._backend.device_info(self._backend.default_input_device()))

    def default_output_device(self) -> DeviceHandler:
        """Return the default playback device."""
        return DeviceHandler(self._backend.device_info(self._backend.default_output_device()))

    def devices(self) -> list[DeviceHandler]:
        """Return every device the backend knows of."""
        device_ids = self._backend.device_ids()
        if not device_ids:
            print("No device found.")
            return []
        return [DeviceHandler(self._backend.device_info(device_id)) for device_id in device_ids]

    def build_stream(self) -> StreamBuilder:
        """Start describing a stream on this handler's backend."""
        return StreamBuilder(self._backend)