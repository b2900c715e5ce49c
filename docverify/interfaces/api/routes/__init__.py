"""
API Routes.
"""

from . import health, providers, validation

__all__ = ["health", "providers", "validation"]
