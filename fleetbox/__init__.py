"""fleetbox - containers that look like machines."""

__version__ = "0.1.0"
