"""Shared audio and queue configuration for the processing pipeline."""

from __future__ import annotations

import queue

#: Number of samples carried by one audio frame.
SAMPLE_SIZE = 1024

#: Sample rate, in Hz, of every stream the pipeline opens.
SAMPLE_RATE = 44100

#: Number of channels captured from the input device.
AUDIO_CHANNELS = 1

#: Maximum number of frames waiting between producer and consumer.
QUEUE_SIZE = 256


def make_queue() -> queue.Queue:
    """Return a bounded FIFO queue for passing audio frames between threads."""
    return queue.Queue(maxsize=QUEUE_SIZE)