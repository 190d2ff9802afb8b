"""
Interfaces for metadata extractors and history sources.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Protocol

from .models import PackageRecord, Revision


class MetadataExtractor(Protocol):
    """Turn one mirror file into a package record, or decline with None."""

    kind: str

    def extract(self, path: Path, file_hash: Optional[str] = None) -> Optional[PackageRecord]:
        ...


class HistorySource(Protocol):
    """Read the revision history of a tracked manifest file."""

    def list_revisions(self, manifest_path: str) -> Iterable[Revision]:
        ...

    def read_file(self, revision: Revision, manifest_path: str) -> str:
        ...
