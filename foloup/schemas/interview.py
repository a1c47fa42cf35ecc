"""Interview-related Pydantic schemas."""

from typing import Literal, Optional
from datetime import datetime
from pydantic import BaseModel, Field

Difficulty = Literal["easy", "medium", "hard"]


class InterviewQuestionItem(BaseModel):
    question: str


class InterviewCreate(BaseModel):
    """Schema for creating a new interview."""

    name: str = Field(..., min_length=1, max_length=255, description="Interview name")
    objective: Optional[str] = None
    description: Optional[str] = None
    job_description: Optional[str] = Field(
        None, description="Job description/requirements for the position"
    )
    questions: list[InterviewQuestionItem] = Field(default_factory=list)
    difficulty: Difficulty = "medium"
    is_active: bool = True


class InterviewUpdate(BaseModel):
    """Partial update of an interview. Unset fields are left untouched."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    objective: Optional[str] = None
    description: Optional[str] = None
    job_description: Optional[str] = None
    questions: Optional[list[InterviewQuestionItem]] = None
    difficulty: Optional[Difficulty] = None
    is_active: Optional[bool] = None


class InterviewResponse(BaseModel):
    """Schema for interview response."""

    id: int
    organization_id: str
    user_id: int
    name: str
    objective: Optional[str] = None
    description: Optional[str] = None
    job_description: Optional[str] = None
    questions: Optional[list[dict]] = None
    question_count: int
    difficulty: str
    insights: Optional[list[str]] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class GenerateQuestionsRequest(BaseModel):
    """Schema for AI question generation."""

    job_title: str = Field(..., min_length=1)
    job_description: str = Field(..., min_length=1)
    question_count: int = Field(10, ge=1, le=50)
    difficulty: Difficulty = "medium"


class GenerateQuestionsResponse(BaseModel):
    questions: list[InterviewQuestionItem]
    description: str
    provider: str
    count: int


class InsightsResponse(BaseModel):
    interview_id: int
    insights: list[str]
    provider: str


class InterviewStats(BaseModel):
    interview_id: int
    total_responses: int
    completed_responses: int
    analysed_responses: int
    completion_rate: float
    average_score: Optional[float] = None
    average_duration: Optional[int] = None
