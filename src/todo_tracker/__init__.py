"""Two-phase task tracker: check tasks off, then archive them into history."""

__version__ = "0.1.0"
