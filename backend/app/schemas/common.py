"""
MailChimp Sync Backend — Shared Response Schemas
==================================================

What:  Error and health response shapes shared by every router.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    What:  Error body returned for every refused request.

    Example:
        {
            "message": "Invalid data given",
            "errors": {"email_address": ["Field required"]}
        }

    `errors` is only present for validation failures.
    """

    message: str = Field(description="Human-readable error description")
    errors: Optional[Dict[str, List[str]]] = Field(
        default=None, description="Field-level validation reasons"
    )


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    mailchimp: str = Field(description="MailChimp API status: available, unavailable")
    uptime_seconds: float = Field(description="Seconds since service started")
