"""Content core for the Generali's Bar & Kitchen website."""

__version__ = "0.3.0"
