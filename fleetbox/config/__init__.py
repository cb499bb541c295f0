"""Configuration loading and defaults."""
from .defaults import default_cluster
from .loader import ConfigLoader, DEFAULT_CONFIG_FILE

__all__ = ['ConfigLoader', 'DEFAULT_CONFIG_FILE', 'default_cluster']
