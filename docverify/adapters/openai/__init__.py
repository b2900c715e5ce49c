"""
OpenAI Adapter - Chat Completions provider for vision and analysis.
"""

from .client import OpenAIProvider

__all__ = ["OpenAIProvider"]
