"""Security: bearer token verification."""

from entitlements.infrastructure.security.jwt import verify_token

__all__ = ["verify_token"]
