"""
LifeStream Backend: Response Schemas
======================================

What:  Pydantic models for the fixed-shape responses: store acknowledgements,
       tokens, role flags, errors and health.
How:   Used as `response_model` so the OpenAPI docs describe them. Stored
       documents are passed through as plain JSON objects and have no model.

Acknowledgement field names follow the driver's wire names (`insertedId`,
`matchedCount`, ...) so existing clients keep working.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Store acknowledgements
# ══════════════════════════════════════════════════════════════════════════


class InsertAck(BaseModel):
    acknowledged: bool
    insertedId: Any = Field(
        description="Document id: hex string when generated, else the caller's own `_id` as given",
    )


class UpdateAck(BaseModel):
    acknowledged: bool
    matchedCount: int
    modifiedCount: int
    upsertedCount: int = 0
    upsertedId: Any = Field(
        default=None,
        description="Id of the document created by an upsert, else null",
    )


class DeleteAck(BaseModel):
    acknowledged: bool
    deletedCount: int


# ══════════════════════════════════════════════════════════════════════════
# Auth
# ══════════════════════════════════════════════════════════════════════════


class TokenResponse(BaseModel):
    token: str = Field(description="Signed access token, valid for one hour")


class AdminCheck(BaseModel):
    admin: bool


class VolunteerCheck(BaseModel):
    volunteer: bool


# ══════════════════════════════════════════════════════════════════════════
# Errors & health
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Body of every error response.

    Example:
        {
            "error": "forbidden",
            "message": "forbidden access",
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
