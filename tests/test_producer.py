import queue
import threading

import numpy as np
import pytest

from ascii_rta.producer import AudioProducer
from ascii_rta.settings import SAMPLE_SIZE


def make_producer(sine=(0.5,) * 8, pink=(0.25,) * 8, maxsize=0):
    frames = queue.Queue(maxsize=maxsize)
    stop = threading.Event()
    return AudioProducer(frames, stop, sine, pink), frames, stop


def mic_input(value=0.1):
    return np.full(SAMPLE_SIZE, value, dtype=np.float32)


def test_stop_flag_stops_stream_without_queueing():
    producer, frames, stop = make_producer()
    stop.set()
    assert producer.process(None, mic_input(), SAMPLE_SIZE, 0.0, 0) == 1
    assert frames.empty()


def test_missing_input_is_ignored():
    producer, frames, _ = make_producer()
    assert producer.process(None, None, SAMPLE_SIZE, 0.0, 0) == 0
    assert frames.empty()


def test_wrong_frame_count_stops_stream():
    producer, frames, _ = make_producer()
    assert producer.process(None, mic_input(), SAMPLE_SIZE // 2, 0.0, 0) == 1
    assert frames.empty()


def test_no_source_queues_silence():
    producer, frames, _ = make_producer()
    assert producer.process(None, mic_input(), SAMPLE_SIZE, 0.0, 0) == 0
    frame = frames.get_nowait()
    assert frame.shape == (SAMPLE_SIZE,)
    assert not frame.any()


def test_mic_only_passes_input_through():
    producer, frames, _ = make_producer()
    producer.set_mic(True)
    data = np.linspace(-1.0, 1.0, SAMPLE_SIZE, dtype=np.float32)
    producer.process(None, data, SAMPLE_SIZE, 0.0, 0)
    np.testing.assert_allclose(frames.get_nowait(), data)


def test_sources_are_averaged():
    producer, frames, _ = make_producer()
    producer.set_mic(True)
    producer.set_sine_wave(True)
    producer.set_pink_noise(True)
    producer.process(None, mic_input(0.3), SAMPLE_SIZE, 0.0, 0)
    frame = frames.get_nowait()
    np.testing.assert_allclose(frame, np.full(SAMPLE_SIZE, (0.3 + 0.5 + 0.25) / 3), rtol=1e-6)


def test_switching_source_off_removes_it():
    producer, frames, _ = make_producer()
    producer.set_sine_wave(True)
    producer.set_mic(True)
    producer.set_sine_wave(False)
    data = mic_input(0.2)
    producer.process(None, data, SAMPLE_SIZE, 0.0, 0)
    np.testing.assert_allclose(frames.get_nowait(), data)


def test_loop_starts_after_first_sample():
    producer, frames, _ = make_producer(sine=np.arange(4, dtype=np.float32))
    producer.set_sine_wave(True)
    producer.process(None, mic_input(), SAMPLE_SIZE, 0.0, 0)
    frame = frames.get_nowait()
    assert frame[:4].tolist() == [1.0, 2.0, 3.0, 0.0]


def test_loop_continues_across_frames():
    length = 5
    producer, frames, _ = make_producer(pink=np.arange(length, dtype=np.float32))
    producer.set_pink_noise(True)
    producer.process(None, mic_input(), SAMPLE_SIZE, 0.0, 0)
    producer.process(None, mic_input(), SAMPLE_SIZE, 0.0, 0)
    joined = np.concatenate([frames.get_nowait(), frames.get_nowait()]).astype(int)
    steps = np.diff(joined) % length
    assert set(steps.tolist()) == {1}


def test_empty_sine_buffer_raises():
    producer, _, _ = make_producer(sine=())
    producer.set_sine_wave(True)
    with pytest.raises(RuntimeError, match="Sine wave buffer is empty"):
        producer.process(None, mic_input(), SAMPLE_SIZE, 0.0, 0)


def test_full_queue_drops_frame():
    producer, frames, _ = make_producer(maxsize=1)
    assert producer.process(None, mic_input(), SAMPLE_SIZE, 0.0, 0) == 0
    assert producer.process(None, mic_input(), SAMPLE_SIZE, 0.0, 0) == 0
    assert frames.qsize() == 1


def test_call_delegates_to_process():
    producer, frames, _ = make_producer()
    producer.set_mic(True)
    data = mic_input(0.4)
    assert producer(None, data, SAMPLE_SIZE, 0.0, 0) == 0
    np.testing.assert_allclose(frames.get_nowait(), data)