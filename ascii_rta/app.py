"""Terminal application showing a live octave band analysis."""

from __future__ import annotations

import argparse
import curses

from ascii_rta.audio_file import DEFAULT_RESOURCES
from ascii_rta.gui import Gui
from ascii_rta.pipeline import AudioPipeline


def _key_char(key) -> str:
    if isinstance(key, str):
        return key
    if key is None or key < 0:
        return ""
    try:
        return chr(key)
    except (ValueError, OverflowError):
        return ""


def handle_key(key, gui: Gui, pipeline) -> bool:
    """Apply one key press; return False when the application should quit."""
    char = _key_char(key)
    if char == "q":
        return False
    if char == "1":
        gui.sine_on = not gui.sine_on
        pipeline.set_sine_wave(gui.sine_on)
    elif char == "2":
        gui.pink_on = not gui.pink_on
        pipeline.set_pink_noise(gui.pink_on)
    elif char == "3":
        gui.mic_on = not gui.mic_on
        pipeline.set_mic(gui.mic_on)
    return True


def run(screen, pipeline) -> None:
    """Read keys and redraw the chart until the user quits."""
    window = Gui(screen)
    running = True
    while running:
        running = handle_key(screen.getch(), window, pipeline)
        window.draw(pipeline.octave_bands())


def main(argv=None) -> int:
    """Start the analyser on the default input device."""
    parser = argparse.ArgumentParser(prog="ascii-rta", description="Real-time octave band analyser.")
    parser.add_argument(
        "--resources",
        default=str(DEFAULT_RESOURCES),
        help="directory holding the sine and pink noise recordings",
    )
    args = parser.parse_args(argv)

    with AudioPipeline(resources=args.resources) as pipeline:
        curses.wrapper(run, pipeline)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())