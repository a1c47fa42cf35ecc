"""Database models."""

from foloup.models.user import User
from foloup.models.interview import Interview
from foloup.models.candidate import Candidate
from foloup.models.resume import Resume, ResumeAnalysis
from foloup.models.response import Response
from foloup.models.interview_link import CandidateInterviewLink
from foloup.models.ai_provider_preference import AIProviderPreference

__all__ = [
    "User",
    "Interview",
    "Candidate",
    "Resume",
    "ResumeAnalysis",
    "Response",
    "CandidateInterviewLink",
    "AIProviderPreference",
]
