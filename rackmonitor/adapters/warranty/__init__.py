"""Warranty adapters for looking up server entitlement."""

from .catalog import WarrantyCatalog

__all__ = ["WarrantyCatalog"]
