from __future__ import annotations

import pytest

from resource_finder.config_loader import DEFAULT_CONFIG, ConfigError, FinderOptions, load_config


def write(tmp_path, text):
    path = tmp_path / 'config.yml'
    path.write_text(text, encoding='utf-8')
    return path


def test_defaults_without_file():
    cfg = load_config(None)

    assert cfg == DEFAULT_CONFIG
    assert cfg is not DEFAULT_CONFIG
    cfg['sources'].append('file:///tmp')
    assert DEFAULT_CONFIG['sources'] == []


def test_file_overrides_defaults(tmp_path):
    path = write(tmp_path, 'sources: [file:///srv/data]\nrecursive: false\nextensions: [txt, .md]\nmax_depth: 2\n')

    cfg = load_config(path)

    assert cfg['sources'] == ['file:///srv/data']
    assert cfg['recursive'] is False
    assert cfg['extensions'] == ['txt', '.md']
    assert cfg['max_depth'] == 2
    assert cfg['detect_cycles'] is True


def test_empty_file_gives_defaults(tmp_path):
    assert load_config(write(tmp_path, '')) == DEFAULT_CONFIG


@pytest.mark.parametrize(
    'text, message',
    [
        ('- just\n- a list\n', 'mapping'),
        ('colour: blue\n', 'Unknown'),
        ('sources: file:///tmp\n', 'sources'),
        ('recursive: maybe\n', 'recursive'),
        ('max_depth: -1\n', 'max_depth'),
        ('max_depth: true\n', 'max_depth'),
        ('checksum_algo: crc32\n', 'crc32'),
        ('sources: [unclosed\n', 'Cannot parse'),
    ],
)
def test_invalid_config(tmp_path, text, message):
    with pytest.raises(ConfigError, match=message):
        load_config(write(tmp_path, text))


def test_finder_options_from_config(tmp_path):
    cfg = load_config(write(tmp_path, 'max_depth: 3\ndetect_cycles: false\n'))

    options = FinderOptions.from_config(cfg)

    assert options == FinderOptions(max_depth=3, detect_cycles=False)
    assert FinderOptions.from_config(DEFAULT_CONFIG) == FinderOptions()
