"""Metadata collection for discovered resources.

Collects filesystem metadata and optional checksums for resources reported
by the discovery engine.  Checksums are computed from the resource's own
byte stream, so they reflect exactly what a consumer would read.
"""

from __future__ import annotations

import hashlib
import os
from dataclasses import dataclass
from typing import BinaryIO, Optional

import xxhash

from ..discovery.engine import DiscoveredResource

CHUNK_SIZE = 8192


@dataclass
class ResourceMetadata:
    name: str
    path: str
    size_bytes: int
    mtime: float
    checksum: Optional[str] = None


def new_hasher(algo: str):
    """Return a fresh hash object for ``algo``.

    Supported algorithms: ``md5``, ``sha1``, ``xxh128``.
    """
    if algo.lower() == 'md5':
        return hashlib.md5()
    if algo.lower() == 'sha1':
        return hashlib.sha1()
    if algo.lower() == 'xxh128':
        return xxhash.xxh3_128()
    raise ValueError(f'Unsupported checksum algorithm: {algo}')


def compute_checksum(stream: BinaryIO, algo: str) -> str:
    """Hash everything remaining in ``stream`` and return the hex digest."""
    h = new_hasher(algo)
    for chunk in iter(lambda: stream.read(CHUNK_SIZE), b''):
        h.update(chunk)
    return h.hexdigest()


def get_resource_metadata(resource: DiscoveredResource, checksum_algo: Optional[str] = None) -> ResourceMetadata:
    """Gather metadata and an optional checksum for a discovered resource.

    Must be called before the discovery generator is resumed, while the
    resource's opener is still valid.

    Args:
        resource: Resource yielded by ``discover_resources``.
        checksum_algo: Name of checksum algorithm to compute (or ``None`` to skip).

    Returns:
        ``ResourceMetadata`` with size, modification time and optional checksum.
    """
    with resource.open() as stream:
        st = os.fstat(stream.fileno())
        checksum = compute_checksum(stream, checksum_algo) if checksum_algo else None
    return ResourceMetadata(
        name=resource.name,
        path=str(resource.path) if resource.path is not None else resource.name,
        size_bytes=st.st_size,
        mtime=st.st_mtime,
        checksum=checksum,
    )
