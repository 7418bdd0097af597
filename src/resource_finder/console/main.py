"""Command-line interface for the resource finder.

Exposes a ``scan`` command that walks the given locations (or the sources
named in the configuration) and prints the resources found, plus helpers to
list the registered URI schemes and show the effective configuration.
"""

from __future__ import annotations

import json
import logging
import uuid
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config_loader import CHECKSUM_ALGOS, ConfigError, FinderOptions, load_config
from ..discovery.engine import discover_resources
from ..errors import ResourceFinderError
from ..logging.logger import CSVLogger, JSONLogger
from ..metadata.scanner import get_resource_metadata
from ..scanning.factory import default_registry


console = Console()


def _load(config_path: Optional[str]) -> dict:
    try:
        return load_config(Path(config_path) if config_path else None)
    except ConfigError as exc:
        raise click.BadParameter(str(exc), param_hint='--config') from exc


@click.group()
@click.option('-v', '--verbose', count=True, help='Increase log verbosity (-v info, -vv debug).')
def cli(verbose: int) -> None:
    """Resource finder CLI."""
    level = {0: logging.WARNING, 1: logging.INFO}.get(verbose, logging.DEBUG)
    logging.basicConfig(level=level, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')


@cli.command()
@click.argument('locations', nargs=-1)
@click.option('--config', 'config_path', type=click.Path(exists=True, dir_okay=False), default=None, help='Path to configuration file.')
@click.option('--recursive/--flat', default=None, help='Descend into subdirectories (default from config).')
@click.option('--ext', 'extensions', multiple=True, help='Only report resources with this suffix; repeatable.')
@click.option('--checksum', 'checksum_algo', type=click.Choice(CHECKSUM_ALGOS, case_sensitive=False), default=None, help='Checksum algorithm.')
@click.option('--max-depth', type=click.IntRange(min=0), default=None, help='Deepest directory level to enter.')
@click.option('--csv', 'csv_path', type=click.Path(dir_okay=False, writable=True), default=None, help='Write records to a CSV file.')
@click.option('--json', 'json_path', type=click.Path(dir_okay=False, writable=True), default=None, help='Write records to a JSON file.')
def scan(
    locations: Tuple[str, ...],
    config_path: Optional[str],
    recursive: Optional[bool],
    extensions: Tuple[str, ...],
    checksum_algo: Optional[str],
    max_depth: Optional[int],
    csv_path: Optional[str],
    json_path: Optional[str],
) -> None:
    """Scan LOCATIONS (file URIs or paths) and display discovered resources."""
    cfg = _load(config_path)
    if max_depth is not None:
        cfg['max_depth'] = max_depth
    sources = list(locations) or cfg['sources']
    if not sources:
        raise click.UsageError('No locations given and no sources configured.')
    if recursive is None:
        recursive = cfg['recursive']
    extensions = list(extensions) or cfg['extensions']
    checksum_algo = checksum_algo or cfg.get('checksum_algo')

    table = Table(title='Discovered resources')
    table.add_column('Name')
    table.add_column('Path')
    table.add_column('Size (bytes)', justify='right')
    table.add_column('Modified', justify='right')
    table.add_column('Checksum')

    run_id = uuid.uuid4().hex
    csv_logger = CSVLogger(Path(csv_path)) if csv_path else None
    json_logger = JSONLogger(Path(json_path)) if json_path else None
    registry = default_registry(FinderOptions.from_config(cfg))
    count = 0
    try:
        for resource in discover_resources(sources, extensions, recursive=recursive, registry=registry):
            meta = get_resource_metadata(resource, checksum_algo=checksum_algo)
            table.add_row(escape(meta.name), escape(meta.path), str(meta.size_bytes), str(int(meta.mtime)), meta.checksum or '')
            if csv_logger:
                csv_logger.log_resource(meta, run_id, resource.source)
            if json_logger:
                json_logger.add_record(meta, resource.source)
            count += 1
    except ResourceFinderError as exc:
        raise click.ClickException(str(exc)) from exc
    finally:
        if csv_logger:
            csv_logger.close()
        if json_logger:
            json_logger.flush()

    console.print(table)
    console.print(f'{count} resource(s) found in {len(sources)} location(s).')


@cli.command()
def schemes() -> None:
    """List the URI schemes that can be scanned."""
    for scheme in default_registry().schemes():
        console.print(scheme)


@cli.command()
@click.option('--config', 'config_path', type=click.Path(exists=True, dir_okay=False), default=None, help='Path to configuration file.')
def show_config(config_path: Optional[str]) -> None:
    """Print the current configuration."""
    cfg = _load(config_path)
    console.print_json(json.dumps(cfg, indent=2))


if __name__ == '__main__':  # pragma: no cover
    cli()
