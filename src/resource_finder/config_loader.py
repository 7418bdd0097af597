"""Configuration loading for the resource finder.

Configuration lives in a YAML file whose keys are merged over
:data:`DEFAULT_CONFIG`.  Traversal knobs are exposed to the scanners through
:class:`FinderOptions`; the remaining keys are consumed by the discovery
engine and the CLI.
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

DEFAULT_CONFIG: Dict[str, Any] = {
    'sources': [],
    'recursive': True,
    'extensions': [],
    'checksum_algo': None,
    'max_depth': None,
    'detect_cycles': True,
}

CHECKSUM_ALGOS = ('md5', 'sha1', 'xxh128')


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class FinderOptions:
    """Traversal knobs shared by every finder created for one scan.

    Attributes:
        max_depth: Deepest directory level to descend into, the root being
            level ``0``.  ``None`` means unbounded.
        detect_cycles: Skip a directory that is one of its own ancestors
            (compared by device and inode), which stops symlink loops.
    """

    max_depth: Optional[int] = None
    detect_cycles: bool = True

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any]) -> 'FinderOptions':
        return cls(max_depth=cfg.get('max_depth'), detect_cycles=bool(cfg.get('detect_cycles', True)))


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load a YAML configuration file and merge it over the defaults.

    Args:
        path: Configuration file, or ``None`` for the defaults alone.

    Returns:
        The merged configuration dictionary.

    Raises:
        ConfigError: If the file is not a YAML mapping or a value has the
            wrong type.
    """
    cfg = deepcopy(DEFAULT_CONFIG)
    if path is None:
        return cfg
    with Path(path).open('r', encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigError(f'Cannot parse {path}: {exc}') from exc
    if data is None:
        return cfg
    if not isinstance(data, dict):
        raise ConfigError(f'{path} must contain a mapping, got {type(data).__name__}')
    unknown = set(data) - set(DEFAULT_CONFIG)
    if unknown:
        raise ConfigError(f'Unknown configuration keys: {", ".join(sorted(unknown))}')
    cfg.update(data)
    validate_config(cfg)
    return cfg


def validate_config(cfg: Mapping[str, Any]) -> None:
    for key in ('sources', 'extensions'):
        value = cfg[key]
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise ConfigError(f'{key!r} must be a list of strings')
    for key in ('recursive', 'detect_cycles'):
        if not isinstance(cfg[key], bool):
            raise ConfigError(f'{key!r} must be true or false')
    max_depth = cfg['max_depth']
    if max_depth is not None and (isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 0):
        raise ConfigError("'max_depth' must be a non-negative integer or null")
    algo = cfg['checksum_algo']
    if algo is not None and str(algo).lower() not in CHECKSUM_ALGOS:
        raise ConfigError(f'Unsupported checksum algorithm: {algo}')
