from types import SimpleNamespace
from unittest import mock

import numpy as np
import pytest

from ascii_rta.backend import (
    AudioBackend,
    PygameBackend,
    StreamFlags,
    StreamOptions,
    StreamParameters,
)


class FakeAudioDevice:
    def __init__(self, devicename, iscapture, frequency, audioformat, numchannels, chunksize,
                 allowed_changes, callback):
        self.devicename = devicename
        self.iscapture = iscapture
        self.frequency = frequency
        self.numchannels = numchannels
        self.chunksize = chunksize
        self.callback = callback
        self.paused = 1
        self.closed = False

    def pause(self, pause_on):
        self.paused = pause_on

    def close(self):
        self.closed = True


@pytest.fixture
def env():
    opened = []

    def factory(*args):
        device = FakeAudioDevice(*args)
        opened.append(device)
        return device

    names = {True: ["Capture A"], False: ["Speakers", "Headphones"]}
    with mock.patch("pygame.init"), \
            mock.patch("pygame._sdl2.audio.get_audio_device_names",
                       side_effect=lambda iscapture=False: names[bool(iscapture)]), \
            mock.patch("pygame._sdl2.audio.AudioDevice", side_effect=factory):
        yield SimpleNamespace(backend=PygameBackend(), opened=opened)


def feed(device, values):
    memory = memoryview(bytearray(np.asarray(values, dtype=np.float32).tobytes()))
    device.callback(device, memory)


def pull(device, count):
    buffer = bytearray(count * 4)
    device.callback(device, memoryview(buffer))
    return np.frombuffer(bytes(buffer), dtype=np.float32)


def test_stream_options_defaults():
    options = StreamOptions()
    assert options.flags == StreamFlags.NONE
    assert options.number_of_buffers == 2


def test_flags_combine():
    options = StreamOptions()
    options.flags |= StreamFlags.HOG_DEVICE
    options.flags |= StreamFlags.SCHEDULE_REALTIME
    assert StreamFlags.HOG_DEVICE in options.flags
    assert StreamFlags.SCHEDULE_REALTIME in options.flags
    assert StreamFlags.MINIMIZE_LATENCY not in options.flags


def test_stream_parameters_first_channel_default():
    assert StreamParameters(device_id=5, channels=1).first_channel == 0


def test_audio_backend_is_abstract():
    with pytest.raises(TypeError):
        AudioBackend()


def test_devices_numbered_capture_first(env):
    backend = env.backend
    assert backend.device_ids() == [0, 1, 2]
    assert backend.device_info(0).name == "Capture A"
    assert backend.device_info(2).name == "Headphones"


def test_default_devices(env):
    backend = env.backend
    assert backend.default_input_device() == 0
    assert backend.default_output_device() == 1
    assert backend.device_info(0).is_default_input
    assert backend.device_info(1).is_default_output
    assert not backend.device_info(2).is_default_output


def test_device_capabilities(env):
    backend = env.backend
    capture = backend.device_info(0)
    playback = backend.device_info(1)
    assert capture.input_channels > 0 and capture.output_channels == 0
    assert playback.output_channels > 0 and playback.input_channels == 0
    assert 44100 in capture.sample_rates


def test_unknown_device_raises(env):
    with pytest.raises(RuntimeError):
        env.backend.device_info(99)


def test_wrong_direction_raises(env):
    with pytest.raises(RuntimeError):
        env.backend.open_stream(StreamParameters(0, 1), None, 44100, 256, lambda *a: 0)
    assert not env.backend.is_stream_open()


def test_needs_a_direction(env):
    with pytest.raises(RuntimeError):
        env.backend.open_stream(None, None, 44100, 256, lambda *a: 0)


def test_input_stream_delivers_samples(env):
    backend = env.backend
    received = []

    def callback(output, input, frames, stream_time, status):
        received.append((output, input.copy(), frames))
        return 0

    granted = backend.open_stream(None, StreamParameters(0, 1), 44100, 256, callback)
    assert granted == 256
    assert backend.is_stream_open()
    device = env.opened[0]
    assert device.iscapture

    feed(device, [0.5, -0.5])
    assert received == []

    backend.start_stream()
    assert device.paused == 0
    assert backend.is_stream_running()
    feed(device, [0.5, -0.5])
    assert len(received) == 1
    output, samples, frames = received[0]
    assert output is None
    assert frames == 2
    assert samples.tolist() == [0.5, -0.5]


def test_output_stream_writes_callback_data(env):
    backend = env.backend

    def callback(output, input, frames, stream_time, status):
        output[:] = 0.25
        return 0

    backend.open_stream(StreamParameters(1, 1), None, 44100, 128, callback)
    backend.start_stream()
    assert pull(env.opened[0], 4).tolist() == [0.25] * 4


def test_output_silent_before_start(env):
    backend = env.backend
    backend.open_stream(StreamParameters(1, 1), None, 44100, 128, lambda out, *a: 1)
    assert pull(env.opened[0], 3).tolist() == [0.0] * 3


def test_non_zero_result_halts(env):
    backend = env.backend
    backend.open_stream(StreamParameters(1, 1), None, 44100, 128, lambda *a: 1)
    backend.start_stream()
    pull(env.opened[0], 2)
    assert not backend.is_stream_running()
    assert backend.is_stream_open()


def test_duplex_passes_captured_input(env):
    backend = env.backend

    def echo(output, input, frames, stream_time, status):
        output[:] = input
        return 0

    backend.open_stream(StreamParameters(1, 1), StreamParameters(0, 1), 44100, 64, echo)
    backend.start_stream()
    capture, playback = env.opened
    feed(capture, [0.1, 0.2, 0.3])
    assert pull(playback, 3) == pytest.approx([0.1, 0.2, 0.3])
    assert pull(playback, 3).tolist() == [0.0] * 3


def test_stop_and_close(env):
    backend = env.backend
    backend.open_stream(None, StreamParameters(0, 1), 44100, 256, lambda *a: 0)
    backend.start_stream()
    backend.stop_stream()
    device = env.opened[0]
    assert device.paused == 1
    assert not backend.is_stream_running()
    backend.close_stream()
    assert device.closed
    assert not backend.is_stream_open()


def test_second_open_raises(env):
    backend = env.backend
    backend.open_stream(None, StreamParameters(0, 1), 44100, 256, lambda *a: 0)
    with pytest.raises(RuntimeError):
        backend.open_stream(StreamParameters(1, 1), None, 44100, 256, lambda *a: 0)


def test_start_without_stream_raises(env):
    with pytest.raises(RuntimeError):
        env.backend.start_stream()