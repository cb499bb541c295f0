"""Core infrastructure: logging, retry and errors."""
