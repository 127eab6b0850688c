"""Shared API schemas: the uniform error and denial body."""

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body of every error response (denials, conflicts, not found, validation)."""

    success: bool = False
    error: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable message, safe to show")
    details: dict[str, Any] = Field(default_factory=dict)


DENIAL_RESPONSES: dict[int | str, dict[str, Any]] = {
    401: {"description": "Missing or invalid bearer token", "model": ErrorResponse},
    403: {"description": "Capability or ownership denied", "model": ErrorResponse},
}
