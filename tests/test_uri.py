from __future__ import annotations

import os
from pathlib import Path

import pytest

from resource_finder.errors import InvalidUriError
from resource_finder.uri import ensure_uri, path_to_uri, uri_scheme, uri_to_path

posix_only = pytest.mark.skipif(os.name == 'nt', reason='POSIX path layout')


@posix_only
@pytest.mark.parametrize(
    'uri, expected',
    [
        ('file:///tmp/x', '/tmp/x'),
        ('file:///tmp/my%20dir/a.txt', '/tmp/my dir/a.txt'),
        ('file://localhost/tmp/x', '/tmp/x'),
        ('file://user@host/tmp/x', '/tmp/x'),
        ('file:///tmp/x?query=1#frag', '/tmp/x'),
        ('file:/tmp/x', '/tmp/x'),
    ],
)
def test_uri_to_path(uri, expected):
    assert uri_to_path(uri) == Path(expected)


@pytest.mark.parametrize('uri', ['http://host/x', 'relative/path', 'file:', 'file://host'])
def test_uri_to_path_rejects(uri):
    with pytest.raises(InvalidUriError):
        uri_to_path(uri)


def test_uri_scheme_is_lowercased():
    assert uri_scheme('FiLe:///tmp') == 'file'


def test_uri_scheme_rejects_non_strings():
    with pytest.raises(InvalidUriError):
        uri_scheme(None)


def test_path_round_trip(tmp_path):
    target = tmp_path / 'with space'

    uri = path_to_uri(target)

    assert uri.startswith('file:')
    assert '%20' in uri
    assert uri_to_path(uri) == target


def test_ensure_uri(tmp_path):
    assert ensure_uri('file:///tmp/x') == 'file:///tmp/x'
    assert ensure_uri('mem://bucket') == 'mem://bucket'
    assert ensure_uri(tmp_path) == tmp_path.as_uri()
    assert ensure_uri(str(tmp_path)) == tmp_path.as_uri()
