"""Composite resource finder.

Concatenates a LIFO stack of child finders.  The child on top of the stack
is the active one; once it is exhausted it is removed, closed, and the next
child takes over.  Children may be pushed at any time, including by a child
from inside its own ``has_next``, which is how lazy recursion into
subdirectories is expressed.
"""

from __future__ import annotations

import logging
from typing import BinaryIO, List, Optional

from ..errors import EndOfSequence, ResourceFinderError
from .base import ResourceFinder

logger = logging.getLogger(__name__)


class CompositeResourceFinder(ResourceFinder):
    """Depth-first concatenation of child finders.

    The composite owns every child it holds: each pushed child is closed
    exactly once, either after it reports exhaustion or when the composite
    itself is closed.  A child whose resource is still current stays open
    until the next call to ``next`` or ``close``, so ``open`` keeps working
    after ``has_next`` has found that child exhausted.
    """

    def __init__(self) -> None:
        self._stack: List[ResourceFinder] = []
        # Child that produced the most recent ``next``.
        self._current: Optional[ResourceFinder] = None
        # Set once the current child is exhausted and off the stack; it is
        # closed when the next resource is requested or on ``close``.
        self._current_detached = False
        self._closed = False

    def push(self, finder: ResourceFinder) -> None:
        if self._closed:
            # Nothing will ever iterate it, so release it straight away.
            finder.close()
            return
        self._stack.append(finder)

    def has_next(self) -> bool:
        while self._stack:
            child = self._stack[-1]
            if child.has_next():
                if child is self._stack[-1]:
                    return True
                # Children pushed while answering go first.
                continue
            # The child may have pushed new children before running dry, so
            # it is not necessarily still on top.
            self._discard(child)
        return False

    def next(self) -> str:
        available = self.has_next()
        self._release_current()
        if not available:
            raise EndOfSequence('no more resources')
        child = self._stack[-1]
        name = child.next()
        self._current = child
        return name

    def open(self) -> BinaryIO:
        return self._active().open()

    @property
    def current_path(self) -> str:
        return self._active().current_path

    def close(self) -> None:
        self._closed = True
        self._release_current()
        while self._stack:
            self._stack.pop().close()

    def _active(self) -> ResourceFinder:
        if self._current is None:
            raise ResourceFinderError('no current resource; call next() first')
        return self._current

    def _release_current(self) -> None:
        if self._current is not None and self._current_detached:
            self._current.close()
        self._current = None
        self._current_detached = False

    def _discard(self, child: ResourceFinder) -> None:
        for index in range(len(self._stack) - 1, -1, -1):
            if self._stack[index] is child:
                del self._stack[index]
                break
        logger.debug('Finder exhausted: %r', child)
        if child is self._current:
            # Its resource stays openable until the caller moves on.
            self._current_detached = True
        else:
            child.close()
