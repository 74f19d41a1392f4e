import queue
import threading
import time

import numpy as np
import pytest

from ascii_rta.consumer import AudioConsumer
from ascii_rta.settings import SAMPLE_SIZE


def wait_until(predicate, timeout=10.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def white_noise(seed=0):
    rng = np.random.default_rng(seed)
    return rng.uniform(-1.0, 1.0, SAMPLE_SIZE).astype(np.float32)


def test_bands_start_at_zero():
    with AudioConsumer(queue.Queue(), threading.Event()) as consumer:
        assert consumer.octave_bands() == (0.0,) * 10


def test_white_noise_gives_levels_below_full_scale():
    frames = queue.Queue()
    with AudioConsumer(frames, threading.Event()) as consumer:
        for seed in range(3):
            frames.put(white_noise(seed))
        assert wait_until(lambda: frames.empty() and all(b != 0.0 for b in consumer.octave_bands()))
        time.sleep(0.05)
        bands = consumer.octave_bands()
    assert len(bands) == 10
    assert all(-200.0 < band < 0.0 for band in bands)


def test_silence_hits_the_floor():
    frames = queue.Queue()
    with AudioConsumer(frames, threading.Event()) as consumer:
        frames.put(np.zeros(SAMPLE_SIZE, dtype=np.float32))
        assert wait_until(lambda: consumer.octave_bands()[0] != 0.0)
        bands = consumer.octave_bands()
    assert bands == pytest.approx((-200.0,) * 10)


def test_close_sets_stop_flag_and_stops_analysis():
    frames = queue.Queue()
    stop = threading.Event()
    consumer = AudioConsumer(frames, stop)
    consumer.close()
    assert stop.is_set()
    frames.put(white_noise())
    time.sleep(0.1)
    assert consumer.octave_bands() == (0.0,) * 10
    assert frames.qsize() == 1


def test_external_stop_flag_ends_consumer():
    frames = queue.Queue()
    stop = threading.Event()
    consumer = AudioConsumer(frames, stop)
    stop.set()
    time.sleep(0.1)
    frames.put(white_noise())
    time.sleep(0.1)
    consumer.close()
    assert frames.qsize() == 1