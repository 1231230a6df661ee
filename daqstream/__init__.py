"""Signal meta information, data type decoding and time base helpers for a signal streaming protocol."""

__version__ = "0.1.0"