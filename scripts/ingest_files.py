#!/usr/bin/env python
"""
Index local copies of FTP files as file records.

Each file becomes one FileRecord: its text content, the FTP server it was
fetched from, a source label and its modification date.

Usage:
    PYTHONPATH=.
    python scripts/ingest_files.py --server ftp.example.org --source ftp1 downloads/*.txt
    python scripts/ingest_files.py --server ftp.example.org --index files --dry-run downloads/
"""

import argparse
import sys
from datetime import date
from pathlib import Path
from typing import Iterable, List

from api.files.models import FileRecord
from api.files.services import FileDocumentOperations, OpenSearchFileOperations
from core.config import get_settings
from core.logger import logger
from core.opensearch import get_opensearch_client, init_indexes


class FileIngester:
    """Builds file records from local files and indexes them."""

    def __init__(
        self,
        operations: FileDocumentOperations | None,
        index: str,
        server: str,
        source: str,
        dry_run: bool = False,
    ):
        self.operations = operations
        self.index = index
        self.server = server
        self.source = source
        self.dry_run = dry_run
        self.stats = {"scanned": 0, "indexed": 0, "errors": 0}

    def build_record(self, path: Path) -> FileRecord:
        modified = date.fromtimestamp(path.stat().st_mtime)
        return FileRecord(
            source=self.source,
            server=self.server,
            text=path.read_text(encoding="utf-8", errors="replace"),
            modification_date=modified,
        )

    def ingest(self, paths: Iterable[Path]) -> dict:
        for path in paths:
            self.stats["scanned"] += 1
            try:
                record = self.build_record(path)
            except OSError as e:
                logger.error("Could not read %s: %s", path, e)
                self.stats["errors"] += 1
                continue

            if self.dry_run:
                logger.info("[dry run] Would index %s as %s", path, record.id)
                continue

            result = self.operations.insert(record, self.index, record.id)
            if result.ok:
                logger.debug("Indexed %s as %s", path, record.id)
                self.stats["indexed"] += 1
            else:
                self.stats["errors"] += 1

        logger.info(
            "Ingest completed. Scanned: %d, indexed: %d, errors: %d",
            self.stats["scanned"],
            self.stats["indexed"],
            self.stats["errors"],
        )
        return self.stats


def collect_paths(arguments: List[str]) -> List[Path]:
    """Expand directories into the regular files they contain"""
    paths = []
    for argument in arguments:
        path = Path(argument)
        if path.is_dir():
            paths.extend(sorted(p for p in path.rglob("*") if p.is_file()))
        else:
            paths.append(path)
    return paths


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("paths", nargs="+", help="Files or directories to ingest")
    parser.add_argument("--server", required=True, help="FTP server the files came from")
    parser.add_argument("--source", default="ftp", help="Source label stored on each record")
    parser.add_argument("--index", default=None, help="Target index (default: FILES_INDEX)")
    parser.add_argument("--dry-run", action="store_true", help="Build records without indexing")
    args = parser.parse_args(argv)

    index = args.index or get_settings().FILES_INDEX

    operations = None
    if not args.dry_run:
        client = get_opensearch_client()
        if not client:
            logger.error("OpenSearch client is not available.")
            return -1
        init_indexes(client, [index])
        operations = OpenSearchFileOperations(client)

    ingester = FileIngester(
        operations, index, args.server, args.source, dry_run=args.dry_run
    )
    stats = ingester.ingest(collect_paths(args.paths))
    return 1 if stats["errors"] else 0


if __name__ == "__main__":
    sys.exit(main())
