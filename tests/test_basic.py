"""Tests for the mirror_inventory package."""

import pytest


def test_package_import():
    """Test that the package can be imported."""
    import mirror_inventory
    assert mirror_inventory.__version__ == "0.1.0"


def test_cli_import():
    """Test that CLI module can be imported."""
    from mirror_inventory.cli import main
    assert callable(main)


def test_inventory_import():
    """Test that the inventory builder can be imported."""
    from mirror_inventory.inventory import MirrorInventory
    assert MirrorInventory is not None


def test_default_labels():
    """Test the fixed report placeholders."""
    from mirror_inventory.models import ReportLabels

    labels = ReportLabels()
    assert labels.source == "PyPi"
    assert labels.reviewer == "Reviewer"
    assert labels.installer == "Installer"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
