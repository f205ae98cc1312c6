"""Rack adapters reporting server placement and health."""

from .static import StaticRack

__all__ = ["StaticRack"]
