"""Conversion between ``file`` URIs and local filesystem paths.

Only the path component of a URI is meaningful here.  It is percent-decoded
according to the usual URI rules; authority, user-info, query and fragment
are ignored.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union
from urllib.parse import urlsplit
from urllib.request import url2pathname

from .errors import InvalidUriError


def uri_scheme(uri: str) -> str:
    """Return the lowercased scheme of ``uri``.

    Raises:
        InvalidUriError: If ``uri`` is not a string or has no scheme.
    """
    if not isinstance(uri, str):
        raise InvalidUriError(uri, 'expected a string')
    try:
        parts = urlsplit(uri)
    except ValueError as exc:
        raise InvalidUriError(uri, str(exc)) from exc
    if not parts.scheme:
        raise InvalidUriError(uri, 'missing scheme')
    return parts.scheme.lower()


def uri_to_path(uri: str) -> Path:
    """Return the local path named by a ``file`` URI.

    ``file:///tmp/my%20dir`` maps to ``/tmp/my dir``.
    """
    scheme = uri_scheme(uri)
    if scheme != 'file':
        raise InvalidUriError(uri, f'unsupported scheme {scheme!r}')
    path = urlsplit(uri).path
    if not path:
        raise InvalidUriError(uri, 'empty path')
    return Path(url2pathname(path))


def path_to_uri(path: Union[str, Path]) -> str:
    return Path(path).expanduser().resolve().as_uri()


def ensure_uri(location: Union[str, Path]) -> str:
    """Accept either a URI or a plain filesystem path and return a URI.

    Strings without a scheme, and Windows drive paths such as ``C:\\data``,
    are treated as paths.
    """
    if isinstance(location, Path):
        return path_to_uri(location)
    scheme = urlsplit(location).scheme
    if len(scheme) > 1:
        return location
    return path_to_uri(location)
