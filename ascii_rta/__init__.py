"""Real-time octave-band audio analyzer with a terminal bar-chart display."""

__version__ = "0.1.0"