"""Codec for the EM API, the emulated device manager protocol."""

__version__ = "0.1.0"
