"""Bearer token dependencies (composition root).

Credential issuance happens upstream; here the token is only verified and
its ``sub`` claim taken as the actor id.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from entitlements.domain.exceptions import AuthenticationException
from entitlements.infrastructure.security.jwt import verify_token

_http_bearer = HTTPBearer(auto_error=False)


async def get_current_actor_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
) -> str:
    """Return the actor id from the JWT; raise 401 if missing or invalid."""
    if not credentials:
        raise AuthenticationException()
    try:
        payload = verify_token(credentials.credentials)
    except ValueError:
        raise AuthenticationException("Invalid or expired token") from None
    return str(payload["sub"])
