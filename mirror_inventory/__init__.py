"""
Mirror Inventory Tool

Inventory the package artifacts of a local mirror, enriched with file hashes
from an integrity baseline and first-use dates from approved-packages history.
"""

__version__ = "0.1.0"

from .cli import main

__all__ = ["main"]
