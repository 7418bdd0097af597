"""URI scheme dispatch.

Each :class:`UriSchemeResourceFinderFactory` advertises the URI schemes it
understands and builds a finder for a URI.  A :class:`ResourceFinderRegistry`
collects factories and picks one by the lowercased scheme of the URI.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Dict, FrozenSet, List, Optional

from ..config_loader import FinderOptions
from ..errors import InvalidUriError
from ..finder.base import ResourceFinder
from ..uri import uri_scheme

logger = logging.getLogger(__name__)


class UriSchemeResourceFinderFactory(ABC):

    @property
    @abstractmethod
    def schemes(self) -> FrozenSet[str]:
        """Lowercase URI schemes this factory can scan."""

    @abstractmethod
    def create(self, uri: str, recursive: bool = True) -> ResourceFinder:
        """Create a finder over the resources located by ``uri``.

        Raises:
            InvalidUriError: If ``uri`` is malformed or uses another scheme.
        """


class ResourceFinderRegistry:
    """Append-only mapping from URI scheme to factory."""

    def __init__(self, options: Optional[FinderOptions] = None) -> None:
        self.options = options or FinderOptions()
        self._factories: Dict[str, UriSchemeResourceFinderFactory] = {}

    def register(self, factory: UriSchemeResourceFinderFactory) -> None:
        """Register ``factory`` for each scheme it advertises.

        Raises:
            ValueError: If one of its schemes is already registered.
        """
        schemes = {scheme.lower() for scheme in factory.schemes}
        taken = sorted(schemes & set(self._factories))
        if taken:
            raise ValueError(f'Schemes already registered: {", ".join(taken)}')
        for scheme in schemes:
            self._factories[scheme] = factory
        logger.debug('Registered %s for schemes %s', type(factory).__name__, sorted(schemes))

    def schemes(self) -> List[str]:
        return sorted(self._factories)

    def factory_for(self, scheme: str) -> UriSchemeResourceFinderFactory:
        """Return the factory registered for ``scheme``.

        Raises:
            KeyError: If no factory handles ``scheme``.
        """
        key = scheme.lower()
        if key not in self._factories:
            raise KeyError(f'No finder registered for scheme {scheme!r}. Available: {self.schemes()}')
        return self._factories[key]

    def create(self, uri: str, recursive: bool = True) -> ResourceFinder:
        scheme = uri_scheme(uri)
        if scheme not in self._factories:
            raise InvalidUriError(uri, f'no finder registered for scheme {scheme!r}; available: {self.schemes()}')
        return self._factories[scheme].create(uri, recursive)


def default_registry(options: Optional[FinderOptions] = None) -> ResourceFinderRegistry:
    """Return a registry with the built-in ``file`` factory registered."""
    from .file_scheme import FileSchemeResourceFinderFactory

    registry = ResourceFinderRegistry(options)
    registry.register(FileSchemeResourceFinderFactory(registry.options))
    return registry
