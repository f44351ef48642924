"""careshift: shift aggregation and dashboard analytics for care agencies."""

__version__ = "0.1.0"
