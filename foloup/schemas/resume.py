"""Resume-related Pydantic schemas."""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel


class ResumeResponse(BaseModel):
    id: int
    organization_id: str
    candidate_id: int
    interview_id: int
    filename: str
    file_url: str
    file_size: int
    parsed_content: Optional[str] = None
    status: str
    processing_notes: Optional[str] = None
    uploaded_at: datetime

    class Config:
        from_attributes = True


class ResumeAnalysisResponse(BaseModel):
    id: int
    resume_id: int
    interview_id: int
    ai_provider: str
    overall_score: int
    skills_match: int
    experience_match: int
    education_match: int
    technical_skills: Optional[list[str]] = None
    soft_skills: Optional[list[str]] = None
    experience_summary: Optional[str] = None
    education_summary: Optional[str] = None
    recommendations: Optional[list[str]] = None
    created_at: datetime

    class Config:
        from_attributes = True
