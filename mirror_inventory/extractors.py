"""
Metadata extractors for mirror artifacts.

Wheels carry a ``*.dist-info/METADATA`` file with RFC 822 style headers.
Source archives carry nothing we can read cheaply, so their name and
version are inferred from the filename.
"""

from __future__ import annotations

import logging
import re
import zipfile
from pathlib import Path
from typing import Dict, Optional

from .models import ORIGIN_FILENAME, ORIGIN_METADATA, PackageRecord


logger = logging.getLogger(__name__)


WHEEL_SUFFIX = ".whl"
METADATA_SUFFIX = ".dist-info/METADATA"

# Longest first, so ".tar.gz" wins over a bare ".gz" style match.
SDIST_SUFFIXES = (".tar.gz", ".tar.bz2", ".tar.xz", ".tgz", ".zip")

METADATA_FIELDS = {
    "Name": "name",
    "Version": "version",
    "Requires-Python": "requires_python",
    "Summary": "summary",
    "Home-page": "homepage",
}

_HEADER_RE = re.compile(r"^(?P<key>[A-Za-z0-9-]+):(?P<value>.*)$")

# Greedy name: split at the rightmost hyphen followed by a digit.
_SDIST_NAME_RE = re.compile(r"^(?P<name>.+)-(?P<version>\d\S*)$")


def classify(path: Path) -> Optional[str]:
    """Return ``"wheel"``, ``"sdist"`` or None for an unrecognized file."""
    lower = path.name.lower()
    if lower.endswith(WHEEL_SUFFIX):
        return WheelMetadataExtractor.kind
    if _sdist_suffix(path.name) is not None:
        return SdistFilenameExtractor.kind
    return None


def _sdist_suffix(filename: str) -> Optional[str]:
    lower = filename.lower()
    for suffix in SDIST_SUFFIXES:
        if lower.endswith(suffix):
            return suffix
    return None


def parse_metadata_headers(text: str) -> Dict[str, str]:
    """Collect the interesting headers from METADATA text.

    Later occurrences of a header overwrite earlier ones.
    """
    values: Dict[str, str] = {}
    for line in text.splitlines():
        match = _HEADER_RE.match(line)
        if not match:
            continue
        attr = METADATA_FIELDS.get(match.group("key"))
        if attr is None:
            continue
        values[attr] = match.group("value").strip()
    return values


class WheelMetadataExtractor:
    """Read package metadata embedded in a wheel."""

    kind = "wheel"

    def extract(self, path: Path, file_hash: Optional[str] = None) -> Optional[PackageRecord]:
        path = Path(path)
        try:
            with zipfile.ZipFile(path) as archive:
                entry = self._find_metadata_entry(archive)
                if entry is None:
                    logger.warning("No %s entry in %s", METADATA_SUFFIX, path.name)
                    return None
                with archive.open(entry) as handle:
                    text = handle.read().decode("utf-8", errors="replace")
        except Exception as e:
            logger.warning("Could not read wheel %s: %s", path.name, e)
            return None

        values = parse_metadata_headers(text)
        if not values.get("name") or not values.get("version"):
            logger.warning("Wheel %s is missing Name or Version metadata", path.name)
            return None

        return PackageRecord(
            name=values["name"],
            version=values["version"],
            requires_python=values.get("requires_python", ""),
            summary=values.get("summary", ""),
            homepage=values.get("homepage", ""),
            hash=file_hash,
            filename=path.name,
            origin=ORIGIN_METADATA,
        )

    def _find_metadata_entry(self, archive: zipfile.ZipFile) -> Optional[str]:
        """Return the wheel's own METADATA entry.

        Only a ``.dist-info`` directory at the archive root belongs to the
        wheel itself; nested ones come from vendored packages.
        """
        nested = None
        for entry in archive.namelist():
            if not entry.endswith(METADATA_SUFFIX):
                continue
            if entry.count("/") == 1:
                return entry
            if nested is None:
                nested = entry
        if nested is not None:
            logger.warning(
                "No top-level %s in %s, falling back to %s",
                METADATA_SUFFIX, archive.filename, nested,
            )
        return nested


class SdistFilenameExtractor:
    """Infer name and version from a source archive filename.

    Names that themselves end in ``-<digit>...`` are split at that hyphen,
    which is a known limitation of filename-only inference.
    """

    kind = "sdist"

    def extract(self, path: Path, file_hash: Optional[str] = None) -> Optional[PackageRecord]:
        path = Path(path)
        suffix = _sdist_suffix(path.name)
        if suffix is None:
            logger.debug("Not a source archive: %s", path.name)
            return None

        base = path.name[: -len(suffix)]
        match = _SDIST_NAME_RE.match(base)
        if not match:
            logger.warning("Unrecognized source archive name: %s", path.name)
            return None

        return PackageRecord(
            name=match.group("name"),
            version=match.group("version"),
            hash=file_hash,
            filename=path.name,
            origin=ORIGIN_FILENAME,
        )


_WHEEL_EXTRACTOR = WheelMetadataExtractor()
_SDIST_EXTRACTOR = SdistFilenameExtractor()


def extract_wheel_metadata(path: Path, file_hash: Optional[str] = None) -> Optional[PackageRecord]:
    """Extract a record from a wheel using a shared extractor instance."""
    return _WHEEL_EXTRACTOR.extract(path, file_hash)


def extract_sdist_metadata(path: Path, file_hash: Optional[str] = None) -> Optional[PackageRecord]:
    """Extract a record from a source archive name using a shared extractor instance."""
    return _SDIST_EXTRACTOR.extract(path, file_hash)


EXTRACTORS = {
    WheelMetadataExtractor.kind: _WHEEL_EXTRACTOR,
    SdistFilenameExtractor.kind: _SDIST_EXTRACTOR,
}
