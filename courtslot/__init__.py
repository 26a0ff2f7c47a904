"""Court booking and time-slot scheduling engine."""

__version__ = "0.1.0"
