"""The resource finder capability.

A resource finder is a single-consumer pull iterator over resource names.
After each successful :meth:`ResourceFinder.next` the caller may call
:meth:`ResourceFinder.open` any number of times to obtain fresh byte streams
for that resource; the streams belong to the caller.  Finders are one-shot:
there is no way to restart a traversal.

Besides the explicit ``has_next``/``next`` pair, finders support the Python
iterator protocol (iteration yields names) and can be used as context
managers, which close them on exit.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import BinaryIO, Iterator

from ..errors import UnsupportedOperationError


class ResourceFinder(ABC):

    @abstractmethod
    def has_next(self) -> bool:
        """Return ``True`` if another resource is available.

        Repeated calls without an intervening :meth:`next` return the same
        answer.  May perform filesystem I/O.
        """

    @abstractmethod
    def next(self) -> str:
        """Advance to the next resource and return its name.

        Raises:
            EndOfSequence: If no further resources exist.
        """

    @abstractmethod
    def open(self) -> BinaryIO:
        """Return a new readable stream over the current resource."""

    def close(self) -> None:
        """Release any retained state.  Safe to call more than once."""

    def reset(self) -> None:
        raise UnsupportedOperationError(f'{type(self).__name__} cannot be restarted')

    @property
    def current_path(self) -> str:
        """Full path of the resource last returned by :meth:`next`."""
        raise UnsupportedOperationError(f'{type(self).__name__} does not expose resource paths')

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        if not self.has_next():
            raise StopIteration
        return self.next()

    def __enter__(self) -> 'ResourceFinder':
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
