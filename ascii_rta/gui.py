"""Text-mode bar chart of the octave band levels."""

from __future__ import annotations

import curses
import math
from typing import NamedTuple, Sequence

from ascii_rta.analyzer import BAND_COUNT

HELP_LINE = "Press q to quit | Toggle sources: 1=Sine  2=Pink  3=Mic"
OCTAVE_LABELS = ("31.5Hz", "63Hz", "125Hz", "250Hz", "500Hz", "1KHz", "2KHz", "4KHz", "8KHz", "16KHz")

#: Number of rows of the tallest bar.
MAX_HEIGHT = 20
#: Levels are shown within [MIN_DB, MAX_DB].
MIN_DB = -100.0
MAX_DB = 0.0

BAR_WIDTH = 7
Y_AXIS_OFFSET = 8
CHART_WIDTH = BAR_WIDTH * BAND_COUNT
TOTAL_WIDTH = Y_AXIS_OFFSET + CHART_WIDTH

#: Milliseconds that a key read waits before giving up.
KEY_TIMEOUT_MS = 100


class Cell(NamedTuple):
    """Text to write at a screen position."""

    row: int
    col: int
    text: str


def _bar_height(level: float) -> int:
    if math.isnan(level):
        return 0
    clamped = min(max(level, MIN_DB), MAX_DB)
    return int((clamped - MIN_DB) / (MAX_DB - MIN_DB) * MAX_HEIGHT)


def layout(octave_bands: Sequence[float], sine_on: bool, pink_on: bool, mic_on: bool) -> list[Cell]:
    """Return every piece of text of one chart frame, in drawing order."""
    bands = [float(value) for value in octave_bands]
    if len(bands) != BAND_COUNT:
        raise ValueError(f"expected {BAND_COUNT} band levels, got {len(bands)}")

    cells = [Cell(0, 0, HELP_LINE)]

    for db in range(0, -100, -10):
        row = 1 + int((MAX_DB - db) / (MAX_DB - MIN_DB) * MAX_HEIGHT)
        cells.append(Cell(row, 0, f"{db:4d}|"))
        cells.append(Cell(row + 1, 4, "|"))
        cells.append(Cell(row, TOTAL_WIDTH - 5, f"|{db:4d}"))
        cells.append(Cell(row + 1, TOTAL_WIDTH - 5, "|"))

    for index, (level, label) in enumerate(zip(bands, OCTAVE_LABELS)):
        col = index * BAR_WIDTH + Y_AXIS_OFFSET
        cells.extend(Cell(MAX_HEIGHT - y, col, "#") for y in range(_bar_height(level)))
        cells.append(Cell(MAX_HEIGHT + 1, col - 2, label))

    states = ["ON" if flag else "OFF" for flag in (sine_on, pink_on, mic_on)]
    cells.append(
        Cell(
            MAX_HEIGHT + 3,
            0,
            f"Sources: [Sine: {states[0]}] [Pink: {states[1]}] [Mic: {states[2]}]",
        )
    )
    return cells


class Gui:
    """Draws the band levels and source states on a curses window."""

    def __init__(self, screen) -> None:
        self._screen = screen
        self.sine_on = False
        self.pink_on = False
        self.mic_on = False
        try:
            curses.noecho()
            curses.curs_set(0)
        except curses.error:
            pass
        screen.timeout(KEY_TIMEOUT_MS)

    @property
    def screen(self):
        """The window the chart is drawn on."""
        return self._screen

    def draw(self, octave_bands: Sequence[float]) -> None:
        """Redraw the whole chart for the given band levels."""
        cells = layout(octave_bands, self.sine_on, self.pink_on, self.mic_on)
        self._screen.erase()
        for cell in cells:
            try:
                self._screen.addstr(cell.row, cell.col, cell.text)
            except curses.error:
                # Text falling outside a small terminal is dropped.
                pass
        self._screen.refresh()