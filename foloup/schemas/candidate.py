"""Candidate schemas."""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field

from foloup.services.ats_matcher import ATSMatchResult


class CandidateCreate(BaseModel):
    interview_id: int
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=64)
    resume_filename: str = Field(..., min_length=1, max_length=255)
    resume_file_url: Optional[str] = None
    ats_score: int = Field(0, ge=0, le=100)
    ats_missing_skills: list[str] = Field(default_factory=list)
    ats_feedback: Optional[str] = None


class CandidateUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=64)
    ats_score: Optional[int] = Field(None, ge=0, le=100)
    ats_missing_skills: Optional[list[str]] = None
    ats_feedback: Optional[str] = None


class CandidateResponse(BaseModel):
    id: int
    organization_id: str
    interview_id: int
    name: str
    email: str
    phone: Optional[str] = None
    resume_filename: str
    resume_file_url: Optional[str] = None
    ats_score: int
    ats_missing_skills: Optional[list[str]] = None
    ats_feedback: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class BulkUploadResult(BaseModel):
    """Outcome for one file of a bulk upload."""

    file: str
    candidate_name: Optional[str] = None
    result: Optional[ATSMatchResult] = None
    candidate_id: Optional[int] = None
    no_contact_info: bool = False
    error: Optional[str] = None


class BulkUploadResponse(BaseModel):
    results: list[BulkUploadResult]
    created: list[CandidateResponse]
