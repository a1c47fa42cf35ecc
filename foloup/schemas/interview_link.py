"""Candidate interview link schemas."""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel


class CandidateLinkCreate(BaseModel):
    candidate_id: int
    interview_id: int
    expires_at: Optional[datetime] = None
    notes: Optional[str] = None


class CandidateLinkResponse(BaseModel):
    id: int
    candidate_id: int
    interview_id: int
    organization_id: str
    unique_link_id: str
    link_url: str
    status: str
    expires_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    response_id: Optional[int] = None
    created_by: Optional[int] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ExpireLinksResponse(BaseModel):
    expired: int


class PublicInterview(BaseModel):
    """What a candidate sees before starting an interview."""

    id: int
    name: str
    objective: Optional[str] = None
    description: Optional[str] = None
    questions: Optional[list[dict]] = None
    question_count: int

    class Config:
        from_attributes = True


class PublicLinkResponse(BaseModel):
    unique_link_id: str
    status: str
    expires_at: Optional[datetime] = None
    candidate_name: Optional[str] = None
    candidate_email: Optional[str] = None
    interview: PublicInterview
