"""cardball — state tracking for simulated baseball card games."""

__version__ = "0.1.0"
