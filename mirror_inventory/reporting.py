"""
Reporting and export utilities.
"""

from __future__ import annotations

import logging
import sys
from collections import Counter
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, TextIO

import pandas as pd

from .models import REPORT_COLUMNS, InventoryRow, PackageRecord


logger = logging.getLogger(__name__)


ROW_SEPARATOR = "\r\n"
FIELD_SEPARATOR = "\t"


def format_rows(rows: Iterable[InventoryRow]) -> str:
    """Render rows as tab-separated lines joined by CRLF."""
    return ROW_SEPARATOR.join(
        FIELD_SEPARATOR.join(_clean(value) for value in row.as_tuple())
        for row in rows
    )


def _clean(value: str) -> str:
    # Tabs and line breaks inside a field would shift columns.
    if any(c in value for c in "\t\r\n"):
        return " ".join(value.split())
    return value


def write_report(
    rows: Sequence[InventoryRow],
    output: Optional[Path] = None,
    stream: Optional[TextIO] = None,
) -> int:
    """Write the TSV report to ``output`` or ``stream`` (stdout by default).

    Returns the number of rows written. Nothing is written for an empty report.
    """
    if not rows:
        logger.info("No packages found, nothing to report")
        return 0

    text = format_rows(rows)
    if output is not None:
        output = Path(output)
        output.parent.mkdir(parents=True, exist_ok=True)
        with open(output, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        logger.info("Wrote %d package rows to %s", len(rows), output)
    else:
        _write_untranslated(stream or sys.stdout, text)
        logger.info("Wrote %d package rows to standard output", len(rows))
    return len(rows)


def _write_untranslated(stream: TextIO, text: str) -> None:
    # Bypass newline translation; win32 stdout turns "\n" into "\r\n".
    buffer = getattr(stream, "buffer", None)
    if buffer is None:
        stream.write(text)
        return
    stream.flush()
    buffer.write(text.encode(getattr(stream, "encoding", None) or "utf-8", errors="replace"))
    buffer.flush()


def rows_to_frame(rows: Iterable[InventoryRow]) -> pd.DataFrame:
    return pd.DataFrame([row.as_tuple() for row in rows], columns=REPORT_COLUMNS)


def export_csv(rows: Iterable[InventoryRow], csv_file: Path) -> Path:
    csv_file = Path(csv_file)
    csv_file.parent.mkdir(parents=True, exist_ok=True)
    rows_to_frame(rows).to_csv(csv_file, index=False)
    return csv_file


def export_worksheet(rows: Iterable[InventoryRow], excel_file: Path, sheet_name: str = "Inventory") -> Path:
    excel_file = Path(excel_file)
    excel_file.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(excel_file, engine='openpyxl') as writer:
        # Excel sheet names have a 31 character limit
        rows_to_frame(rows).to_excel(writer, sheet_name=sheet_name[:31], index=False)
    return excel_file


def print_summary(rows: List[InventoryRow], records: Sequence[Optional[PackageRecord]]) -> None:
    origins = Counter(record.origin for record in records if record is not None)
    logger.info("=" * 60)
    logger.info("MIRROR INVENTORY")
    logger.info("=" * 60)
    logger.info("Artifacts scanned: %d", len(records))
    logger.info("Rows produced: %d", len(rows))
    for origin, count in sorted(origins.items()):
        logger.info("  from %s: %d", origin, count)
    logger.info("Rows with hash: %d", sum(1 for row in rows if row.hash))
    logger.info("Rows with first-use date: %d", sum(1 for row in rows if row.date_first_used))
    logger.info("=" * 60)
