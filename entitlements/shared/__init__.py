"""Shared utilities: logging setup and id/time helpers. No business logic."""
