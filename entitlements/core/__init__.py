"""Core: config, lifespan, exception handlers, and rate limiter."""

from entitlements.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
