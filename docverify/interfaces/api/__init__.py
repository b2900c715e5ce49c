"""
API Interface - FastAPI REST API for document cross-validation.
"""

from .main import app, create_app

__all__ = ["app", "create_app"]
