"""
Mirror scan and the join of artifact metadata with hashes and first-use dates.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from tqdm import tqdm

from .baseline import load_hash_lookup
from .config import InventoryConfig
from .extractors import EXTRACTORS, SdistFilenameExtractor, WheelMetadataExtractor, classify
from .history import mine_first_use
from .identity import normalize
from .models import InventoryRow, PackageRecord, ReportLabels


logger = logging.getLogger(__name__)


class MirrorNotFoundError(FileNotFoundError):
    """Raised when the mirror directory does not exist."""


def join_inventory(
    records: Iterable[Optional[PackageRecord]],
    hash_lookup: Dict[str, str],
    first_use: Dict[str, str],
    location: str,
    labels: ReportLabels = ReportLabels(),
) -> List[InventoryRow]:
    """Assemble report rows in input order, skipping declined (None) records."""
    rows = []
    for record in records:
        if record is None:
            continue
        file_hash = record.hash
        if file_hash is None and record.filename:
            file_hash = hash_lookup.get(record.filename)
        rows.append(InventoryRow(
            name=record.name,
            version=record.version,
            date_first_used=first_use.get(normalize(record.name), ""),
            requires_python=record.requires_python,
            source=labels.source,
            reviewer=labels.reviewer,
            installer=labels.installer,
            summary=record.summary,
            homepage=record.homepage,
            location=location,
            hash=file_hash or "",
        ))
    return rows


def scan_mirror(
    mirror_dir: Path,
    hash_lookup: Optional[Dict[str, str]] = None,
    show_progress: bool = False,
) -> List[Optional[PackageRecord]]:
    """Extract a record per artifact: wheels first, then source archives."""
    hash_lookup = hash_lookup or {}
    grouped: Dict[str, List[Path]] = {
        WheelMetadataExtractor.kind: [],
        SdistFilenameExtractor.kind: [],
    }
    for path in sorted(Path(mirror_dir).iterdir()):
        if not path.is_file():
            continue
        kind = classify(path)
        if kind is None:
            logger.debug("Skipping unrecognized file %s", path.name)
            continue
        grouped[kind].append(path)

    records: List[Optional[PackageRecord]] = []
    for kind, paths in grouped.items():
        extractor = EXTRACTORS[kind]
        for path in tqdm(paths, desc=f"Reading {kind}s", disable=not show_progress):
            records.append(extractor.extract(path, hash_lookup.get(path.name)))
    return records


class MirrorInventory:
    """Build the inventory report for one mirror directory."""

    def __init__(self, config: InventoryConfig):
        self.config = config
        self.hash_lookup: Dict[str, str] = {}
        self.first_use: Dict[str, str] = {}
        self.records: List[Optional[PackageRecord]] = []

    def validate(self) -> None:
        mirror_dir = Path(self.config.mirror_dir)
        if not mirror_dir.is_dir():
            raise MirrorNotFoundError(f"Mirror directory not found: {mirror_dir}")

    def build(self) -> List[InventoryRow]:
        self.validate()
        config = self.config

        self.hash_lookup = load_hash_lookup(config.baseline_path)
        self.first_use = mine_first_use(
            config.history_repo,
            config.manifest_path,
            timeout=config.git_timeout,
            show_progress=config.show_progress,
        )

        logger.info("Scanning mirror %s", config.mirror_dir)
        self.records = scan_mirror(config.mirror_dir, self.hash_lookup, config.show_progress)

        rows = join_inventory(
            self.records,
            self.hash_lookup,
            self.first_use,
            location=str(config.mirror_dir),
            labels=config.labels,
        )
        logger.info(
            "Parsed %d of %d artifacts",
            len(rows),
            len(self.records),
        )
        return rows


def build_inventory(config: InventoryConfig) -> List[InventoryRow]:
    """Validate the mirror and return its report rows."""
    return MirrorInventory(config).build()
