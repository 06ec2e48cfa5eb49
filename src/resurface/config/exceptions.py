"""Exceptions raised while loading Resurface configuration."""


class ConfigError(Exception):
    """Raised when configuration data cannot be parsed or validated."""
