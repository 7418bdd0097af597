import os

import pytest


@pytest.fixture
def layout(tmp_path):
    """Root directory with files a, b, c and a subdirectory holding z.

    Each file contains its own path relative to the root.
    """
    root = tmp_path / 'd'
    root.mkdir()
    for name in ('a', 'b', 'c'):
        (root / name).write_text(name)
    (root / 'sub').mkdir()
    (root / 'sub' / 'z').write_text('sub/z')
    return root


@pytest.fixture
def sorted_listing(monkeypatch):
    """Make directory listings deterministic (alphabetical)."""
    real_listdir = os.listdir
    monkeypatch.setattr(os, 'listdir', lambda path: sorted(real_listdir(path)))
