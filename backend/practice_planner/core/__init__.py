# Core package initialization
# Cross-cutting concerns: configuration, errors, logging and validation

from . import config, exceptions, logging_config, validation

__all__ = [
    "config",
    "exceptions",
    "logging_config",
    "validation",
]
