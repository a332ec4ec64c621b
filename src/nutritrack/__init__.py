"""Personal nutrition targets and daily food tracking."""

__version__ = "0.1.0"
