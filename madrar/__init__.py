# madrar/__init__.py
"""Inventory, production and sales tracking for a honey and herbs producer."""

__version__ = "1.0.0"
