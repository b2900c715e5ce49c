"""
Gemini Adapter - Google Gemini REST provider for vision and analysis.
"""

from .client import GeminiProvider

__all__ = ["GeminiProvider"]
