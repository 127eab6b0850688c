"""Entitlement service: permission resolution and row-ownership filtering."""

__version__ = "1.0.0"
