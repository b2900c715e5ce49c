"""
CLI Interface - Command-line tools for DocVerify.

Provides commands for:
- Document cross-validation
- Extraction only
- Provider inspection
- Running the API server
"""

from .main import app, main

__all__ = ["app", "main"]
