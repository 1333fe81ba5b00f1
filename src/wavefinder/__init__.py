"""WaveFinder: surf-trip destination ranking."""

__version__ = "0.1.0"
