"""ATS analysis of stored resumes against an interview."""

import logging
from dataclasses import asdict
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator
from sqlalchemy.ext.asyncio import AsyncSession

from foloup.models.interview import Interview
from foloup.models.resume import Resume, ResumeAnalysis
from foloup.services.ai_service import AICompletionRequest, AIMessage, AIService
from foloup.services.prompts import RESUME_ANALYSIS_SYSTEM_PROMPT, resume_analysis_prompt
from foloup.services.resume_scoring import requirements_from_text, score_resume

logger = logging.getLogger(__name__)


class ResumeAnalysisResult(BaseModel):
    overall_score: int = Field(..., ge=0, le=100)
    skills_match: int = Field(0, ge=0, le=100)
    experience_match: int = Field(0, ge=0, le=100)
    education_match: int = Field(0, ge=0, le=100)
    technical_skills: list[str] = Field(default_factory=list)
    soft_skills: list[str] = Field(default_factory=list)
    experience_summary: str = ""
    education_summary: str = ""
    recommendations: list[str] = Field(default_factory=list)

    @field_validator(
        "overall_score", "skills_match", "experience_match", "education_match",
        mode="before",
    )
    @classmethod
    def clamp(cls, value):
        if value is None:
            return 0
        return max(0, min(100, round(float(value))))


class ResumeAnalyzer:
    """Produces and stores ``ResumeAnalysis`` rows."""

    def __init__(self, ai_service: AIService):
        self.ai_service = ai_service

    async def analyze(
        self,
        resume: Resume,
        interview: Interview,
        provider: str,
        db: AsyncSession,
    ) -> ResumeAnalysis:
        if not resume.parsed_content:
            raise ValueError("Resume has no parsed content. Upload a readable file first.")

        result = await self._analyze_with_ai(resume, interview, provider)
        if result is None:
            result = self._analyze_with_rules(resume, interview)

        analysis = ResumeAnalysis(
            resume_id=resume.id,
            interview_id=interview.id,
            ai_provider=provider,
            **result.model_dump(),
        )
        db.add(analysis)
        resume.status = "processed"
        await db.commit()
        await db.refresh(analysis)
        return analysis

    async def _analyze_with_ai(
        self, resume: Resume, interview: Interview, provider: str
    ) -> Optional[ResumeAnalysisResult]:
        request = AICompletionRequest(
            model="gpt-4o",
            messages=[
                AIMessage(role="system", content=RESUME_ANALYSIS_SYSTEM_PROMPT),
                AIMessage(
                    role="user",
                    content=resume_analysis_prompt(
                        job_title=interview.name,
                        job_description=interview.requirements_text or "",
                        resume_content=resume.parsed_content or "",
                    ),
                ),
            ],
            response_format="json_object",
            max_tokens=1000,
            temperature=0.3,
        )

        try:
            data = await self.ai_service.complete_json(request, provider)
            return ResumeAnalysisResult.model_validate(data)
        except (ValueError, ValidationError) as e:
            logger.warning(f"Unusable AI analysis for resume {resume.id}: {e}")
            return None

    def _analyze_with_rules(self, resume: Resume, interview: Interview) -> ResumeAnalysisResult:
        logger.info(f"Scoring resume {resume.id} with keyword rules")
        requirements = requirements_from_text(interview.requirements_text or "")
        score = score_resume(resume.parsed_content or "", requirements)
        return ResumeAnalysisResult(**asdict(score))
