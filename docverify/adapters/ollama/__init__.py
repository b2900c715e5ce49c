"""
Ollama Adapter - Local model provider for vision and analysis.
"""

from .client import OllamaProvider

__all__ = ["OllamaProvider"]
