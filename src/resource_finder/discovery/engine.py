"""Discovery engine for the resource finder.

Drives one finder per source location and yields the resources whose
suffix matches a set of extensions.  Filtering happens here, on the consumer
side; the finders themselves report every regular file.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Callable, Iterator, Optional, Sequence, Union

from ..config_loader import FinderOptions
from ..errors import ResourceFinderError, UnsupportedOperationError
from ..finder.base import ResourceFinder
from ..scanning.factory import ResourceFinderRegistry, default_registry
from ..uri import ensure_uri

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiscoveredResource:
    """A resource reported by a finder.

    ``opener`` returns a fresh byte stream over the resource.  It only works
    until the discovery generator is resumed; after that it raises
    ``ResourceFinderError``.
    """

    source: str
    name: str
    path: Optional[Path]
    opener: Callable[[], BinaryIO]

    def open(self) -> BinaryIO:
        return self.opener()


def normalize_extensions(extensions: Sequence[str]) -> frozenset:
    return frozenset(ext.lower().lstrip('.') for ext in extensions if ext.strip('.'))


def discover_resources(
    sources: Sequence[Union[str, Path]],
    extensions: Sequence[str] = (),
    recursive: bool = True,
    registry: Optional[ResourceFinderRegistry] = None,
    options: Optional[FinderOptions] = None,
) -> Iterator[DiscoveredResource]:
    """Yield the resources found under ``sources``.

    Args:
        sources: URIs or plain filesystem paths to scan, in order.
        extensions: File suffixes (with or without leading dot) to include,
            case-insensitive.  Empty means every resource.
        recursive: Descend into subdirectories.
        registry: Scheme registry to create finders from.  Defaults to
            :func:`~resource_finder.scanning.factory.default_registry`.
        options: Traversal options for the default registry.

    Yields:
        ``DiscoveredResource`` entries, source by source.

    Raises:
        InvalidUriError: If a source uses a scheme nobody handles.
        ScanError: If a source root cannot be listed.
    """
    registry = registry or default_registry(options)
    normalized_exts = normalize_extensions(extensions)
    cursor = _Cursor()
    for src in sources:
        uri = ensure_uri(src)
        logger.info('Scanning %s (recursive=%s)', uri, recursive)
        with registry.create(uri, recursive) as finder:
            try:
                for name in finder:
                    cursor.position += 1
                    if normalized_exts and name.lower().rsplit('.', 1)[-1] not in normalized_exts:
                        continue
                    yield DiscoveredResource(
                        source=uri,
                        name=name,
                        path=_current_path(finder),
                        opener=_opener(finder, name, cursor),
                    )
            finally:
                cursor.position += 1
            stats = getattr(finder, 'stats', None)
            if stats is not None and stats.failures:
                logger.warning('%s: skipped %d unreadable entries', uri, stats.failures)


class _Cursor:
    """Counts finder advances so stale openers can be detected."""

    def __init__(self) -> None:
        self.position = 0


def _opener(finder: ResourceFinder, name: str, cursor: _Cursor) -> Callable[[], BinaryIO]:
    token = cursor.position

    def open_resource() -> BinaryIO:
        if cursor.position != token:
            raise ResourceFinderError(f'{name} is no longer current; open it before resuming discovery')
        return finder.open()

    return open_resource


def _current_path(finder: ResourceFinder) -> Optional[Path]:
    try:
        return Path(finder.current_path)
    except UnsupportedOperationError:
        return None
