"""Pydantic schemas for request/response validation."""

from foloup.schemas.user import UserCreate, UserResponse, UserLogin, Token
from foloup.schemas.interview import InterviewCreate, InterviewUpdate, InterviewResponse
from foloup.schemas.candidate import CandidateCreate, CandidateUpdate, CandidateResponse
from foloup.schemas.resume import ResumeResponse, ResumeAnalysisResponse
from foloup.schemas.interview_link import CandidateLinkCreate, CandidateLinkResponse
from foloup.schemas.response import ResponseCreate, ResponseUpdate, ResponseOut

__all__ = [
    "UserCreate",
    "UserResponse",
    "UserLogin",
    "Token",
    "InterviewCreate",
    "InterviewUpdate",
    "InterviewResponse",
    "CandidateCreate",
    "CandidateUpdate",
    "CandidateResponse",
    "ResumeResponse",
    "ResumeAnalysisResponse",
    "CandidateLinkCreate",
    "CandidateLinkResponse",
    "ResponseCreate",
    "ResponseUpdate",
    "ResponseOut",
]
