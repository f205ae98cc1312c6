"""Inventory adapters for loading racks and warranty records.

Implementations support:
- JSON file (inventory plus a health snapshot re-read every sweep)
"""

from .json_file import FileHealthSource, Inventory, load_inventory

__all__ = ["FileHealthSource", "Inventory", "load_inventory"]
