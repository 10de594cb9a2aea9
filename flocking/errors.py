"""Flocking-specific exception hierarchy."""


class FlockingError(Exception):
    """Base class for all flocking exceptions."""


class ConfigurationError(FlockingError, ValueError):
    """Raised when a boid or simulation parameter is invalid."""

    def __init__(self, param_name: str | None = None, reason: str | None = None):
        # raise ConfigurationError("generic message")
        # or raise ConfigurationError("mass", "must be positive")
        if param_name and reason:
            message = f"Invalid configuration for '{param_name}': {reason}"
            self.param_name = param_name
        else:
            message = param_name if param_name else "Invalid configuration"
            self.param_name = None

        super().__init__(message)
