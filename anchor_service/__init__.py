"""anchor-service: HTTP service over anchors, their metrics and their assets."""

__version__ = "0.1.0"
