"""Warehouse slotting engine: placement scoring, move zones and chain shifts."""

__version__ = "0.1.0"
