"""Interview response (call) schemas."""

from typing import Any, Optional
from datetime import datetime
from pydantic import BaseModel, Field


class ResponseCreate(BaseModel):
    """Submitted by the candidate-facing client once a call has started."""

    call_id: str = Field(..., min_length=1, max_length=128)
    name: Optional[str] = None
    email: Optional[str] = None
    details: Optional[dict[str, Any]] = None
    is_ended: bool = False
    duration: Optional[int] = Field(None, ge=0)


class ResponseUpdate(BaseModel):
    details: Optional[dict[str, Any]] = None
    is_ended: Optional[bool] = None
    duration: Optional[int] = Field(None, ge=0)


class ResponseOut(BaseModel):
    id: int
    interview_id: int
    call_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    candidate_link_id: Optional[int] = None
    details: Optional[dict[str, Any]] = None
    analytics: Optional[dict[str, Any]] = None
    is_analysed: bool
    is_ended: bool
    duration: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ResponseCount(BaseModel):
    organization_id: str
    count: int


class AnalyticsRequest(BaseModel):
    transcript: Optional[str] = None


class CommunicationRequest(BaseModel):
    transcript: Optional[str] = None
