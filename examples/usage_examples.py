#!/usr/bin/env python3
"""
Example script showing how to use the mirror-inventory tool.
"""

from pathlib import Path

from mirror_inventory.config import InventoryConfig
from mirror_inventory.history import mine_first_use
from mirror_inventory.inventory import MirrorInventory
from mirror_inventory.reporting import export_worksheet, format_rows


def example_basic_inventory():
    """Example: Inventory a mirror without enrichment."""
    print("="*60)
    print("Example 1: Basic Inventory")
    print("="*60)

    config = InventoryConfig(mirror_dir=Path("./mirror"))
    rows = MirrorInventory(config).build()

    for row in rows:
        print(f"{row.name} {row.version} ({row.summary or 'no summary'})")


def example_enriched_inventory():
    """Example: Inventory with baseline hashes and first-use dates."""
    print("\n" + "="*60)
    print("Example 2: Enriched Inventory")
    print("="*60)

    config = InventoryConfig(
        mirror_dir=Path("./mirror"),
        baseline_path=Path("./baseline.json"),
        history_repo=Path("./approved-packages"),
    )
    rows = MirrorInventory(config).build()

    print(format_rows(rows))
    excel_file = export_worksheet(rows, Path("./output/inventory.xlsx"))
    print(f"\nWorksheet saved to: {excel_file}")


def example_first_use_dates():
    """Example: First-use dates only."""
    print("\n" + "="*60)
    print("Example 3: First-Use Dates")
    print("="*60)

    index = mine_first_use(Path("./approved-packages"), "requirements.txt")
    for key, date in sorted(index.items()):
        print(f"{key}: {date}")


if __name__ == "__main__":
    example_basic_inventory()
    example_enriched_inventory()
    example_first_use_dates()
