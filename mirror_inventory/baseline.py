"""
Hash lookup built from the mirror integrity baseline document.

The baseline is JSON shaped as ``{"Mirror": {"Files": [{"RelativePath":
..., "Hash": ...}, ...]}}``. Depending on who produced it, the nested
objects may reach us as plain dicts or as attribute objects, so all
navigation goes through :func:`get_field`.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path, PureWindowsPath
from types import SimpleNamespace
from typing import Any, Dict, Iterable, Optional


logger = logging.getLogger(__name__)


MIRROR_FIELD = "Mirror"
FILES_FIELD = "Files"
PATH_FIELD = "RelativePath"
HASH_FIELD = "Hash"


def get_field(obj: Any, name: str) -> Any:
    """Return ``obj[name]`` or ``obj.name``, or None when absent.

    Keys and attribute names are matched exactly first and then
    case-insensitively, for both shapes.
    """
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        fields = obj
    else:
        try:
            fields = vars(obj)
        except TypeError:
            return getattr(obj, name, None)
    if name in fields:
        return fields[name]
    lowered = name.lower()
    for key, value in fields.items():
        if isinstance(key, str) and key.lower() == lowered:
            return value
    return None


def load_baseline_document(path: Path, as_objects: bool = False) -> Any:
    """Parse the baseline JSON, optionally into ``SimpleNamespace`` objects."""
    with open(path, "r", encoding="utf-8-sig") as f:
        if as_objects:
            return json.load(f, object_hook=lambda d: SimpleNamespace(**d))
        return json.load(f)


def iter_file_entries(document: Any) -> Iterable[Any]:
    files = get_field(get_field(document, MIRROR_FIELD), FILES_FIELD)
    if files is None or isinstance(files, (str, bytes)):
        return []
    if isinstance(files, (list, tuple)):
        return files
    # A lone descriptor serialized without its enclosing list.
    return [files]


def build_hash_lookup(document: Any) -> Dict[str, str]:
    """Map base filename -> hash. The first entry for a filename wins."""
    lookup: Dict[str, str] = {}
    for entry in iter_file_entries(document):
        relative_path = get_field(entry, PATH_FIELD)
        file_hash = get_field(entry, HASH_FIELD)
        if not relative_path or file_hash is None:
            continue
        filename = _base_name(str(relative_path))
        if filename and filename not in lookup:
            lookup[filename] = str(file_hash)
    return lookup


def _base_name(relative_path: str) -> str:
    # PureWindowsPath splits on both "\\" and "/".
    return PureWindowsPath(relative_path.strip()).name


def load_hash_lookup(path: Optional[Path], as_objects: bool = False) -> Dict[str, str]:
    """Build the filename -> hash lookup from a baseline document on disk.

    A missing document means no hash data. A document that cannot be
    parsed is logged and also treated as no hash data.
    """
    if path is None or not Path(path).exists():
        logger.debug("Baseline document %s not present, skipping hashes", path)
        return {}

    try:
        document = load_baseline_document(Path(path), as_objects=as_objects)
        lookup = build_hash_lookup(document)
    except Exception as e:
        logger.warning("Could not parse baseline document %s: %s", path, e)
        return {}

    logger.info("Loaded %d file hashes from %s", len(lookup), path)
    return lookup
