# app/models/submission.py
from typing import Any, List, Optional
from pydantic import BaseModel, Field, field_validator

from app.models.enums import FilterMode

class SubmissionRecord(BaseModel):
    """One submission as returned by the upstream ``/api/websites/{code}`` endpoint."""
    name: Optional[str] = None
    email: Optional[str] = None
    status: Optional[str] = None
    website: Optional[str] = None
    decision_reason: Optional[str] = Field(None, alias="decisionReason")

    class Config:
        populate_by_name = True
        extra = "ignore"

    @field_validator("name", "email", "status", "website", "decision_reason", mode="before")
    @classmethod
    def coerce_scalar_to_str(cls, value: Any) -> Optional[str]:
        """Keeps the record when the sheet hands back numbers or booleans; containers become None."""
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return str(value)
        return None

class EventRecordsPayload(BaseModel):
    records: List[SubmissionRecord] = []
    raw: Any = None

class SubmissionRowPublic(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    status: str # Raw status, "Pending" when absent
    normalized_status: str
    website: Optional[str] = None
    decision_reason: Optional[str] = None

class EventViewResponse(BaseModel):
    event_code: str
    filter: FilterMode
    total_records: int
    rows: List[SubmissionRowPublic] = []
    error: Optional[str] = None
