"""Payment-slip upload, extraction and confirmation service."""

__version__ = "0.3.0"
