"""ATS request/response schemas not owned by the matcher service."""

from typing import Optional
from pydantic import BaseModel

from foloup.services.ats_matcher import ATSMatchResult


class FileMatchResult(BaseModel):
    file: str
    result: Optional[ATSMatchResult] = None
    error: Optional[str] = None


class MultipleMatchResponse(BaseModel):
    jd: str
    results: list[FileMatchResult]
