"""
Provider Contract - Interface every result source implements.

Unlike a first-match router, every registered provider sees every query.
Providers stream results lazily (a generator is the natural shape) and poll
the cancellation token between units of work. The aggregator owns timeouts
and error isolation, so a provider may simply raise on failure.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Iterator

from loguru import logger

from omnibar.errors import ConfigError
from omnibar.search.cancellation import CancellationToken
from omnibar.search.models import Result


class Provider(ABC):
    """Base class for all result providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider identifier, unique within a registry."""
        ...

    @abstractmethod
    def search(self, query: str, cancel: CancellationToken) -> Iterable[Result]:
        """
        Produce candidate results for the query.

        Must not keep per-query state on ``self``: the same provider is
        invoked concurrently for overlapping generations.
        """
        ...


class ProviderRegistry:
    """Process-wide name → provider mapping, read-only once frozen."""

    def __init__(self, providers: Iterable[Provider] = ()):
        self._providers: dict[str, Provider] = {}
        self._frozen = False
        for provider in providers:
            self.register(provider)

    def register(self, provider: Provider) -> None:
        if self._frozen:
            raise ConfigError(f"Cannot register '{provider.name}': registry is frozen")
        if provider.name in self._providers:
            raise ConfigError(f"Provider '{provider.name}' is already registered")
        self._providers[provider.name] = provider
        logger.debug(f"Registered provider {provider.name}")

    def freeze(self) -> None:
        """Stop accepting registrations. Called once start-up is done."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name: str) -> Provider:
        return self._providers[name]

    def items(self) -> list[tuple[str, Provider]]:
        return list(self._providers.items())

    def __iter__(self) -> Iterator[Provider]:
        return iter(list(self._providers.values()))

    def __len__(self) -> int:
        return len(self._providers)

    def __contains__(self, name: str) -> bool:
        return name in self._providers
