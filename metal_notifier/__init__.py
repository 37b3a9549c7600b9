"""Heavy metal releases notifier."""

__version__ = "1.0.0"
