"""
Broker message schemas.

Wire contracts for the durable import queue and the fan-out change
exchange. Property names are PascalCase on the wire; incoming keys are
matched case-insensitively so producers that emit camelCase or lowercase
names are still understood.

Dependencies: pydantic
System role: Queue/exchange message contracts
"""

from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class _CaseInsensitiveMessage(BaseModel):
    """Base for messages whose JSON keys may arrive in any letter case."""

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _normalize_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        aliases = {
            (f.alias or name).lower(): (f.alias or name)
            for name, f in cls.model_fields.items()
        }
        return {aliases.get(str(key).lower(), key): value for key, value in data.items()}


class ImportJobMessage(_CaseInsensitiveMessage):
    """Message published to csv-import-queue for every accepted upload."""

    job_id: UUID = Field(..., alias="JobId", description="Import job ID")
    file_name: str = Field(default="", alias="FileName", description="Stored blob name")
    uploaded_at: datetime | None = Field(
        default=None,
        alias="UploadedAt",
        description="Upload timestamp (UTC)",
    )

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "JobId": "550e8400-e29b-41d4-a716-446655440000",
                "FileName": "customers_20240101120000_1a2b3c4d.csv",
                "UploadedAt": "2024-01-01T12:00:00Z",
            }
        },
    )

    def to_json(self) -> str:
        """Serialize with wire (PascalCase) property names."""
        return self.model_dump_json(by_alias=True)


class ChangeEvent(_CaseInsensitiveMessage):
    """Notification broadcast on csv-changes-topic."""

    change_type: str = Field(..., alias="ChangeType", description="e.g. Created, Updated")
    document: Any = Field(default=None, alias="Document", description="Changed entity")
    published_at: datetime = Field(default_factory=_utc_now, alias="PublishedAt")

    def to_json(self) -> str:
        """Serialize with wire (PascalCase) property names."""
        return self.model_dump_json(by_alias=True)
