"""
Configuration - Application settings and error taxonomy.
"""

from .errors import (
    ConfigurationError,
    DocumentProcessingError,
    DocVerifyError,
    ErrorCode,
    InputError,
    ProviderNotFoundError,
    UnsupportedMediaTypeError,
)
from .settings import Settings, configure_logging, get_settings

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "configure_logging",
    # Errors
    "ErrorCode",
    "DocVerifyError",
    "InputError",
    "UnsupportedMediaTypeError",
    "ConfigurationError",
    "ProviderNotFoundError",
    "DocumentProcessingError",
]
