"""linguaisync - AI-assisted synchronization of JSON translation trees."""

__version__ = "1.0.0"
