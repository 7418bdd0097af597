"""Scan record logs for the resource finder.

Provides simple helpers to write CSV and JSON records of discovered
resources.  The ``CSVLogger`` writes each record immediately, while
``JSONLogger`` stores records in a list and writes them to disk when flushed.
"""

from __future__ import annotations

import csv
import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List

from ..metadata.scanner import ResourceMetadata

CSV_FIELDS = ('run_id', 'source', 'name', 'path', 'size_bytes', 'mtime_unix', 'hash')


class CSVLogger:
    def __init__(self, path: Path):
        self.path = path
        self.file = path.open('w', newline='', encoding='utf-8')
        self.writer = csv.DictWriter(self.file, fieldnames=CSV_FIELDS)
        self.writer.writeheader()

    def log_resource(self, meta: ResourceMetadata, run_id: str, source: str) -> None:
        record = {
            'run_id': run_id,
            'source': source,
            'name': meta.name,
            'path': meta.path,
            'size_bytes': meta.size_bytes,
            'mtime_unix': meta.mtime,
            'hash': meta.checksum or '',
        }
        self.writer.writerow(record)
        self.file.flush()

    def close(self) -> None:
        self.file.close()

    def __enter__(self) -> 'CSVLogger':
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class JSONLogger:
    def __init__(self, path: Path):
        self.path = path
        self.records: List[Dict[str, Any]] = []

    def add_record(self, meta: ResourceMetadata, source: str) -> None:
        self.records.append({'source': source, **asdict(meta)})

    def flush(self) -> None:
        with self.path.open('w', encoding='utf-8') as f:
            json.dump(self.records, f, indent=2)
