# ascii-rta

A real-time audio analyzer for the terminal. It captures sound from the
default input device, can mix in a looping 1 kHz sine recording and a
looping pink noise recording, splits the signal into ten octave bands
(31.5 Hz to 16 kHz) with 4th-order Butterworth band-pass filters, and draws
each band's RMS level in dB as an ASCII bar chart with curses.

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

Audio goes through pygame's SDL audio devices, so pygame 2 and a working
capture device are needed to run the application. The chart uses the
standard `curses` module.

## Running

```
ascii-rta
ascii-rta --resources path/to/resources
```

`--resources` names the directory holding `1000.wav` (the sine recording)
and `pink_mono.wav` (the pink noise recording); it defaults to `resources`
in the current directory.

The screen shows one bar per octave band on a scale from -100 dB to 0 dB,
with the state of each source on the last line. Keys:

| Key | Action                       |
|-----|------------------------------|
| `1` | Toggle the sine-wave source  |
| `2` | Toggle the pink-noise source |
| `3` | Toggle the microphone        |
| `q` | Quit                         |

Each captured block of 1024 samples at 44100 Hz becomes one frame: the
samples of the sources that are on are summed and divided by the number of
active sources. With every source off the frame is silent, so the bars
fall to the bottom of the chart.

## Using the pieces from Python

`ascii_rta.analyzer.Analyzer` works on any block of mono float samples. Its
filters keep their state between calls, so consecutive blocks are treated as
one signal:

```python
import numpy as np
from ascii_rta.analyzer import Analyzer

analyzer = Analyzer(44100)
analyzer.process_samples(np.random.uniform(-1.0, 1.0, 32768))
print(analyzer.octave_bands())   # ten levels in dB, lowest band first
```

An empty block raises `ValueError`.

`ascii_rta.audio_file` reads 8/16/24/32-bit PCM and 32/64-bit float WAV
files into interleaved float32 arrays; a file that is missing or cannot be
decoded gives an empty array:

```python
from ascii_rta.audio_file import read_wav_samples, sine_wave_samples, pink_noise_samples

samples = read_wav_samples("resources/pink_mono.wav")
sine = sine_wave_samples("resources")
pink = pink_noise_samples("resources")
```

The whole capture-and-analyse chain runs behind `AudioPipeline`, a context
manager whose `close()` stops the stream and the analysis thread:

```python
import time
from ascii_rta.pipeline import AudioPipeline

with AudioPipeline(resources="resources") as pipeline:
    pipeline.set_pink_noise(True)
    time.sleep(1)
    print(pipeline.octave_bands())
```

Lower-level building blocks:

- `ascii_rta.handler.AudioHandler` wraps a backend (by default
  `ascii_rta.backend.PygameBackend`), lists devices with `devices()`,
  gives `default_input_device()` / `default_output_device()` as
  `ascii_rta.devices.DeviceHandler` objects, and hands out a
  `StreamBuilder` from `build_stream()`. It raises `RuntimeError` when the
  backend has no devices.
- `ascii_rta.stream.StreamBuilder` collects settings by chained calls
  (`input_device`, `output_device`, `sample_rate`, `buffer_frames`,
  `callback`, `auto_start`, `number_of_buffers`, and the flags
  `non_interleaved`, `minimize_latency`, `hog_device`, `schedule_realtime`,
  `alsa_use_default`) and `build()` opens a `StreamHandler`, itself a
  context manager. Failures — an unsupported sample rate, a backend error,
  or a buffer size other than the one asked for — raise `StreamError`.
- `ascii_rta.stream.CallbackHandler` is the base class for stream
  callbacks; subclasses implement `process(output, input, frame_count,
  stream_time, status)` and return non-zero to stop the stream.
- `ascii_rta.backend.AudioBackend` is the interface a backend implements;
  any other audio system can be plugged in through it.
- `ascii_rta.producer.AudioProducer` and `ascii_rta.consumer.AudioConsumer`
  are the two halves of the pipeline, joined by the queue from
  `ascii_rta.settings.make_queue()`.
- `ascii_rta.gui.layout()` returns the text cells of one chart frame
  without touching the terminal; `ascii_rta.gui.Gui` draws them on a curses
  window.

## What it does not do

- No sine or pink noise recordings come with the package. Without
  `1000.wav` and `pink_mono.wav` in the resources directory, those sources
  have no samples and switching them on fails inside the audio callback.
- `PygameBackend` accepts stream flags but they have no effect on SDL
  devices; it reports every common sample rate as supported, since SDL
  converts rates itself.
- Only the default capture device is used by the application; there is no
  option to pick another device.