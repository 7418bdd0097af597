"""Finder for ``file`` URIs.

A :class:`FileSchemeScanner` walks a directory tree depth first and reports
every regular file beneath it.  The walk is driven by the consumer: each
directory is handled by its own :class:`FileSubtreeFinder`, which lists the
directory only when first asked for a resource and pushes a new finder onto
the scanner's :class:`~resource_finder.finder.composite.CompositeResourceFinder`
for every subdirectory it meets.  The composite drains that new finder
before returning to the rest of the parent directory.

Entries that cannot be inspected (vanished files, broken symlinks,
unreadable subdirectories) are skipped and recorded in :class:`ScanStats`.
Only a failure to inspect the root itself is raised, as a
:class:`~resource_finder.errors.ScanError`.  A root that does not exist
yields nothing.
"""

from __future__ import annotations

import logging
import os
import stat
import weakref
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, FrozenSet, List, Optional, Tuple, Union

from ..config_loader import FinderOptions
from ..errors import EndOfSequence, ResourceFinderError, ScanError, ScanErrorKind
from ..finder.base import ResourceFinder
from ..finder.composite import CompositeResourceFinder
from ..uri import uri_to_path
from .factory import UriSchemeResourceFinderFactory

logger = logging.getLogger(__name__)

FileIdentity = Tuple[int, int]


@dataclass
class ScanStats:
    """Counters shared by all finders of one scan."""

    files_found: int = 0
    directories_entered: int = 0
    entries_skipped: int = 0
    failures: int = 0
    errors: List[str] = field(default_factory=list)

    def record_failure(self, path: str, exc: OSError) -> None:
        self.failures += 1
        self.errors.append(f'{path}: {exc.strerror or exc}')
        logger.debug('Skipping %s: %s', path, exc)


class FileSubtreeFinder(ResourceFinder):
    """Finder over one directory, or over a single regular file.

    Only the directory's own files are reported by this finder.
    Subdirectories are handed to the enclosing composite as new finders.
    The composite is held through a weak reference: the composite owns its
    children, never the other way round.
    """

    def __init__(
        self,
        root: Union[str, Path],
        recursive: bool,
        composite: CompositeResourceFinder,
        options: FinderOptions,
        stats: ScanStats,
        depth: int = 0,
        ancestors: FrozenSet[FileIdentity] = frozenset(),
        is_root: bool = False,
    ) -> None:
        self.root = os.fspath(root)
        self.recursive = recursive
        self.depth = depth
        self._composite = weakref.ref(composite)
        self._options = options
        self._stats = stats
        self._ancestors = ancestors
        self._is_root = is_root
        self._identity: Optional[FileIdentity] = None
        # Entries awaiting classification; None until the root is listed.
        self._stack: Optional[List[str]] = None
        self._next_leaf: Optional[str] = None
        self._current_leaf: Optional[str] = None

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.root!r}, depth={self.depth})'

    def has_next(self) -> bool:
        if self._stack is None:
            self._stack = self._seed()
        while self._next_leaf is None and self._stack:
            path = self._stack.pop()
            try:
                st = os.stat(path)
            except OSError as exc:
                self._stats.record_failure(path, exc)
                continue
            if stat.S_ISDIR(st.st_mode):
                if self._should_descend(path, st):
                    self._descend(path)
            elif stat.S_ISREG(st.st_mode):
                self._next_leaf = path
            else:
                self._stats.entries_skipped += 1
        return self._next_leaf is not None

    def next(self) -> str:
        if self._next_leaf is None and not self.has_next():
            raise EndOfSequence(f'no more resources under {self.root}')
        self._current_leaf, self._next_leaf = self._next_leaf, None
        self._stats.files_found += 1
        return os.path.basename(self._current_leaf)

    def open(self) -> BinaryIO:
        path = self.current_path
        try:
            return open(path, 'rb')
        except FileNotFoundError as exc:
            raise ScanError(ScanErrorKind.NOT_FOUND, f'Resource no longer exists: {path}', path) from exc
        except OSError as exc:
            raise ScanError(ScanErrorKind.IO, f'Cannot open {path}: {exc}', path) from exc

    @property
    def current_path(self) -> str:
        if self._current_leaf is None:
            raise ResourceFinderError('no current resource; call next() first')
        return self._current_leaf

    def close(self) -> None:
        self._stack = []
        self._next_leaf = None
        self._current_leaf = None

    def _seed(self) -> List[str]:
        try:
            st = os.stat(self.root)
        except FileNotFoundError as exc:
            if self._is_root:
                logger.debug('Scan root does not exist: %s', self.root)
                return []
            return self._cannot_list(exc)
        except OSError as exc:
            return self._cannot_list(exc)

        if stat.S_ISREG(st.st_mode):
            return [self.root]
        if not stat.S_ISDIR(st.st_mode):
            self._stats.entries_skipped += 1
            return []

        try:
            names = os.listdir(self.root)
        except OSError as exc:
            return self._cannot_list(exc)
        self._identity = (st.st_dev, st.st_ino)
        self._stats.directories_entered += 1
        # Reversed so that entries are popped in listing order.
        return [os.path.join(self.root, name) for name in reversed(names)]

    def _cannot_list(self, exc: OSError) -> List[str]:
        if self._is_root:
            logger.warning('Cannot scan %s: %s', self.root, exc)
            raise ScanError(ScanErrorKind.IO, f'Cannot scan {self.root}: {exc}', self.root) from exc
        self._stats.record_failure(self.root, exc)
        return []

    def _should_descend(self, path: str, st: os.stat_result) -> bool:
        if not self.recursive:
            return False
        max_depth = self._options.max_depth
        if max_depth is not None and self.depth >= max_depth:
            return False
        if self._options.detect_cycles:
            identity = (st.st_dev, st.st_ino)
            if identity == self._identity or identity in self._ancestors:
                logger.debug('Not descending into %s: directory cycle', path)
                self._stats.entries_skipped += 1
                return False
        return True

    def _descend(self, path: str) -> None:
        composite = self._composite()
        if composite is None:
            return
        ancestors = self._ancestors
        if self._identity is not None:
            ancestors = ancestors | {self._identity}
        composite.push(
            FileSubtreeFinder(
                path,
                self.recursive,
                composite,
                self._options,
                self._stats,
                depth=self.depth + 1,
                ancestors=ancestors,
            )
        )


class FileSchemeScanner(ResourceFinder):
    """Depth-first finder over the regular files under a local path.

    ``next`` returns basenames; :attr:`current_path` gives the full path of
    the current resource.  Traversal statistics are available as
    :attr:`stats`.
    """

    def __init__(self, path: Union[str, Path], recursive: bool = True, options: Optional[FinderOptions] = None) -> None:
        self.path = Path(path)
        self.recursive = recursive
        self.options = options or FinderOptions()
        self.stats = ScanStats()
        self._composite = CompositeResourceFinder()
        self._composite.push(
            FileSubtreeFinder(self.path, recursive, self._composite, self.options, self.stats, is_root=True)
        )

    def __repr__(self) -> str:
        return f'{type(self).__name__}({str(self.path)!r}, recursive={self.recursive})'

    def has_next(self) -> bool:
        return self._composite.has_next()

    def next(self) -> str:
        return self._composite.next()

    def open(self) -> BinaryIO:
        return self._composite.open()

    @property
    def current_path(self) -> str:
        return self._composite.current_path

    def close(self) -> None:
        self._composite.close()


class FileSchemeResourceFinderFactory(UriSchemeResourceFinderFactory):
    """Creates :class:`FileSchemeScanner` instances for ``file`` URIs.

    The URI is not checked for existence; a missing location produces an
    empty traversal.
    """

    SCHEMES = frozenset({'file'})

    def __init__(self, options: Optional[FinderOptions] = None) -> None:
        self.options = options or FinderOptions()

    @property
    def schemes(self) -> FrozenSet[str]:
        return self.SCHEMES

    def create(self, uri: str, recursive: bool = True) -> FileSchemeScanner:
        return FileSchemeScanner(uri_to_path(uri), recursive, self.options)
