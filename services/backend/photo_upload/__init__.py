"""Photo Upload API: image uploads forwarded to object storage."""

__version__ = "1.0.0"
