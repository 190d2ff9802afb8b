"""
Package name normalization used to cross-reference mirror artifacts with
the approved-packages history.
"""

from __future__ import annotations

from typing import Optional

from packaging.utils import canonicalize_name


def normalize(name: Optional[str]) -> str:
    """Return the comparable key for a package name.

    Surrounding whitespace is ignored, case is folded and every run of
    ``-``, ``_`` or ``.`` becomes a single ``-``. Blank input yields ``""``.
    """
    if name is None:
        return ""
    stripped = name.strip()
    if not stripped:
        return ""
    return str(canonicalize_name(stripped))
