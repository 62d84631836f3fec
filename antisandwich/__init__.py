"""Slot-window guards against sandwiching by flagged block leaders: windows, keys, instruction builders and their evaluation."""

__version__ = "0.1.0"