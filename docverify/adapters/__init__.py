"""
Adapters - External service integrations.

All AI provider calls and PDF library access are wrapped here to isolate
domains from third-party changes.
"""

from .gemini import GeminiProvider
from .llm import ProviderKind, ProviderRegistry, invoke_with_fallback
from .ollama import OllamaProvider
from .openai import OpenAIProvider
from .pdf import PageImage, PyMuPDFBackend
from .providers import build_registry

__all__ = [
    # Providers
    "OpenAIProvider",
    "GeminiProvider",
    "OllamaProvider",
    # Registry / fallback
    "ProviderKind",
    "ProviderRegistry",
    "build_registry",
    "invoke_with_fallback",
    # PDF
    "PyMuPDFBackend",
    "PageImage",
]
