"""Custom exceptions for configuration handling."""


class ConfigError(Exception):
    """Raised when configuration data cannot be parsed or validated."""
