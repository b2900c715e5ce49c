"""
Provider Registry - Ordered provider handles per kind.

Registration order is the fallback order for alternatives. The registry is
populated once at startup and only read afterwards.
"""

from __future__ import annotations

import logging

from docverify.config import ConfigurationError, ProviderNotFoundError

from .contracts import Provider
from .models import ProviderKind

logger = logging.getLogger(__name__)

__all__ = ["ProviderRegistry"]


class ProviderRegistry:
    """
    Registry of vision and analysis providers.

    Example:
        >>> registry = ProviderRegistry()
        >>> registry.register(ProviderKind.VISION, openai_vision)
        >>> registry.register(ProviderKind.VISION, gemini_vision)
        >>> primary, alternatives = registry.resolve(ProviderKind.VISION, "gemini")
        >>> [p.name for p in alternatives]
        ['openai']
    """

    def __init__(self) -> None:
        self._providers: dict[ProviderKind, list[Provider]] = {
            kind: [] for kind in ProviderKind
        }

    def register(self, kind: ProviderKind, provider: Provider) -> None:
        """
        Register a provider handle.

        Raises:
            ConfigurationError: If a provider with the same name is already
                registered for this kind
        """
        if self.get(kind, provider.name) is not None:
            raise ConfigurationError(
                f"Duplicate {kind.value} provider '{provider.name}'",
                {"provider": provider.name, "kind": kind.value},
            )
        self._providers[kind].append(provider)
        logger.debug(
            "Registered %s provider %s (model=%s)",
            kind.value,
            provider.name,
            provider.config.model,
        )

    def providers(self, kind: ProviderKind) -> list[Provider]:
        """All providers of a kind, in registration order."""
        return list(self._providers[kind])

    def names(self, kind: ProviderKind) -> list[str]:
        return [p.name for p in self._providers[kind]]

    def get(self, kind: ProviderKind, name: str) -> Provider | None:
        """Find a provider by exact name."""
        for provider in self._providers[kind]:
            if provider.name == name:
                return provider
        return None

    def resolve(
        self,
        kind: ProviderKind,
        primary_name: str,
    ) -> tuple[Provider, list[Provider]]:
        """
        Select the primary and its ordered alternatives.

        Args:
            kind: Vision or analysis
            primary_name: Configured primary provider name

        Returns:
            (primary, alternatives) where alternatives excludes the primary
            and keeps registration order

        Raises:
            ProviderNotFoundError: If no provider of this kind has that name
        """
        primary = self.get(kind, primary_name)
        if primary is None:
            raise ProviderNotFoundError(primary_name, kind.value, self.names(kind))

        alternatives = [p for p in self._providers[kind] if p.name != primary_name]
        return primary, alternatives

    def __len__(self) -> int:
        return sum(len(providers) for providers in self._providers.values())
