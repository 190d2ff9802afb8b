"""
Core data models for the mirror inventory.
"""

from __future__ import annotations

from dataclasses import astuple, dataclass
from typing import Optional, Tuple


ORIGIN_METADATA = "metadata"
ORIGIN_FILENAME = "filename"


@dataclass(frozen=True)
class PackageRecord:
    """Package identity and metadata extracted from one mirror artifact."""

    name: str
    version: str
    requires_python: str = ""
    summary: str = ""
    homepage: str = ""
    hash: Optional[str] = None
    filename: str = ""
    origin: str = ORIGIN_METADATA


@dataclass(frozen=True)
class Revision:
    """A commit that touched the tracked manifest."""

    revision_id: str
    date: str


@dataclass(frozen=True)
class ReportLabels:
    """Literal placeholders filled in by a human reviewer later."""

    source: str = "PyPi"
    reviewer: str = "Reviewer"
    installer: str = "Installer"


@dataclass(frozen=True)
class InventoryRow:
    """One report row. Field order is the report column order."""

    name: str
    version: str
    date_first_used: str
    requires_python: str
    source: str
    reviewer: str
    installer: str
    summary: str
    homepage: str
    location: str
    hash: str

    def as_tuple(self) -> Tuple[str, ...]:
        return astuple(self)


REPORT_COLUMNS = [
    "Name",
    "Version",
    "DateFirstUsed",
    "RequiresPython",
    "Source",
    "Reviewer",
    "Installer",
    "Summary",
    "Homepage",
    "Location",
    "Hash",
]
