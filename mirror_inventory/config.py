"""
Run configuration for the mirror inventory.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .history import DEFAULT_GIT_TIMEOUT, DEFAULT_MANIFEST
from .models import ReportLabels


# The mirror host; the report is consumed by Windows-side tooling.
DEFAULT_PLATFORM = "win32"


class UnsupportedPlatformError(RuntimeError):
    """Raised when the tool runs on a host it is not meant for."""


def check_platform(expected: str = DEFAULT_PLATFORM, actual: Optional[str] = None) -> None:
    """Raise :class:`UnsupportedPlatformError` unless ``actual`` matches ``expected``."""
    if actual is None:
        actual = sys.platform
    if not actual.startswith(expected):
        raise UnsupportedPlatformError(
            f"This tool only supports the '{expected}' platform (running on '{actual}')"
        )


@dataclass(frozen=True)
class InventoryConfig:
    """Inputs and fixed labels for one inventory run."""

    mirror_dir: Path
    baseline_path: Optional[Path] = None
    history_repo: Optional[Path] = None
    manifest_path: str = DEFAULT_MANIFEST
    labels: ReportLabels = field(default_factory=ReportLabels)
    git_timeout: float = DEFAULT_GIT_TIMEOUT
    expected_platform: str = DEFAULT_PLATFORM
    show_progress: bool = False

    @classmethod
    def from_args(cls, args) -> "InventoryConfig":
        """Build a config from parsed command-line arguments."""
        return cls(
            mirror_dir=Path(args.mirror_dir),
            baseline_path=Path(args.baseline) if args.baseline else None,
            history_repo=Path(args.history_repo) if args.history_repo else None,
            manifest_path=args.manifest,
            labels=ReportLabels(
                source=args.source_label,
                reviewer=args.reviewer_label,
                installer=args.installer_label,
            ),
            git_timeout=args.git_timeout,
            expected_platform=args.platform,
            show_progress=args.progress,
        )
