"""
Error body shared by every endpoint.

Dependencies: pydantic
System role: Common API response structures
"""

from typing import Any

from pydantic import BaseModel, Field

from csv_processor.core.exceptions import CsvProcessorException, InternalError


class ErrorResponse(BaseModel):
    """Body returned with every 4xx/5xx raised by the domain."""

    success: bool = False
    error: str = Field(description="Error message")
    details: dict[str, Any] | None = Field(default=None, description="Additional error context")

    @classmethod
    def from_exception(cls, exc: CsvProcessorException) -> "ErrorResponse":
        """Client-facing body; server-side failures never expose details."""
        if isinstance(exc, InternalError):
            return cls(error=exc.message)
        return cls(error=exc.message, details=exc.details or None)
