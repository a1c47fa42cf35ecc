"""Service for interview analytics: LLM feedback on responses and aggregate stats."""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from foloup.models.candidate import Candidate
from foloup.models.interview import Interview
from foloup.models.response import Response
from foloup.services.ai_service import AICompletionRequest, AIMessage, AIService
from foloup.services.prompts import (
    ANALYTICS_SYSTEM_PROMPT,
    COMMUNICATION_SYSTEM_PROMPT,
    INSIGHTS_SYSTEM_PROMPT,
    communication_analysis_prompt,
    insights_prompt,
    interview_analytics_prompt,
)

logger = logging.getLogger(__name__)


class InsufficientDataError(ValueError):
    """There is nothing to analyse yet."""


def _transcript_of(response: Response) -> str:
    details = response.details or {}
    return details.get("transcript") or ""


def _overall_score(response: Response) -> Optional[float]:
    if isinstance(response.analytics, dict):
        score = response.analytics.get("overall_score")
        if isinstance(score, (int, float)):
            return float(score)
    return None


class InterviewAnalytics:
    """Service for analyzing interview data and generating insights."""

    def __init__(self, ai_service: Optional[AIService] = None):
        self.ai_service = ai_service

    def _require_ai(self) -> AIService:
        if self.ai_service is None:
            raise RuntimeError("InterviewAnalytics was created without an AI service")
        return self.ai_service

    async def generate_response_analytics(
        self,
        response: Response,
        interview: Interview,
        db: AsyncSession,
        transcript: Optional[str] = None,
        provider: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Generate analytics for one interview response.

        Existing analytics are returned unchanged when they already carry an
        overall score.

        Args:
            response: The response (call) to analyse
            interview: Interview the response belongs to
            db: Database session
            transcript: Transcript to use instead of the stored one
            provider: AI provider override

        Returns:
            Analytics dictionary as stored on the response
        """
        if _overall_score(response) is not None:
            logger.info(f"Returning existing analytics for call {response.call_id}")
            return response.analytics  # type: ignore[return-value]

        interview_transcript = transcript or _transcript_of(response)
        if not interview_transcript:
            raise InsufficientDataError("No transcript available for this response")

        questions = [
            q.get("question", "") for q in (interview.questions or []) if isinstance(q, dict)
        ]
        main_questions = "\n".join(f"{i + 1}. {q}" for i, q in enumerate(questions))

        data = await self._require_ai().complete_json(
            AICompletionRequest(
                model="gpt-4o",
                messages=[
                    AIMessage(role="system", content=ANALYTICS_SYSTEM_PROMPT),
                    AIMessage(
                        role="user",
                        content=interview_analytics_prompt(interview_transcript, main_questions),
                    ),
                ],
                response_format="json_object",
            ),
            provider,
        )
        if not isinstance(data, dict):
            raise ValueError("Analytics response is not a JSON object")

        data["main_interview_questions"] = questions

        response.analytics = data
        response.is_analysed = True
        await db.commit()
        await db.refresh(response)
        return data

    async def analyze_communication(
        self, transcript: str, provider: Optional[str] = None
    ) -> Dict[str, Any]:
        """Communication-skills analysis of a transcript."""
        data = await self._require_ai().complete_json(
            AICompletionRequest(
                model="gpt-4o",
                messages=[
                    AIMessage(role="system", content=COMMUNICATION_SYSTEM_PROMPT),
                    AIMessage(role="user", content=communication_analysis_prompt(transcript)),
                ],
                response_format="json_object",
            ),
            provider,
        )
        if not isinstance(data, dict):
            raise ValueError("Communication analysis is not a JSON object")
        return data

    async def generate_insights(
        self,
        interview: Interview,
        db: AsyncSession,
        provider: Optional[str] = None,
    ) -> List[str]:
        """Summarise the call summaries of ended calls into short insights."""
        result = await db.execute(
            select(Response).where(
                Response.interview_id == interview.id,
                Response.is_ended.is_(True),
            )
        )
        summaries = []
        for response in result.scalars().all():
            details = response.details if isinstance(response.details, dict) else {}
            call_analysis = details.get("call_analysis")
            # client-supplied JSON
            if not isinstance(call_analysis, dict):
                continue
            summary = call_analysis.get("call_summary")
            if isinstance(summary, str) and summary.strip():
                summaries.append(summary)

        if not summaries:
            raise InsufficientDataError("No call summaries available for this interview")

        data = await self._require_ai().complete_json(
            AICompletionRequest(
                model="gpt-4o",
                messages=[
                    AIMessage(role="system", content=INSIGHTS_SYSTEM_PROMPT),
                    AIMessage(
                        role="user",
                        content=insights_prompt(
                            "\n".join(summaries),
                            interview.name,
                            interview.objective or "",
                            interview.description or "",
                        ),
                    ),
                ],
                response_format="json_object",
            ),
            provider,
        )
        insights = data.get("insights") if isinstance(data, dict) else None
        if not isinstance(insights, list):
            raise ValueError("Invalid insights response from AI service")

        interview.insights = [str(i) for i in insights]
        await db.commit()
        return interview.insights

    async def get_interview_stats(
        self, interview_id: int, db: AsyncSession
    ) -> Dict[str, Any]:
        """
        Get response statistics for an interview.

        Args:
            interview_id: Interview ID
            db: Database session

        Returns:
            Dictionary with response counts and score averages
        """
        result = await db.execute(
            select(Response).where(Response.interview_id == interview_id)
        )
        responses = result.scalars().all()

        if not responses:
            return {
                "interview_id": interview_id,
                "total_responses": 0,
                "completed_responses": 0,
                "analysed_responses": 0,
                "completion_rate": 0.0,
                "average_score": None,
                "average_duration": None,
            }

        total = len(responses)
        completed = [r for r in responses if r.is_ended]
        scores = [s for s in (_overall_score(r) for r in responses) if s is not None]
        durations = [r.duration for r in completed if r.duration]

        return {
            "interview_id": interview_id,
            "total_responses": total,
            "completed_responses": len(completed),
            "analysed_responses": sum(1 for r in responses if r.is_analysed),
            "completion_rate": round(len(completed) / total, 2),
            "average_score": round(sum(scores) / len(scores), 1) if scores else None,
            "average_duration": round(sum(durations) / len(durations)) if durations else None,
        }

    async def get_organization_stats(
        self, organization_id: str, db: AsyncSession
    ) -> Dict[str, Any]:
        """Headline numbers for an organization's dashboard."""
        interview_count = await db.scalar(
            select(func.count(Interview.id)).where(
                Interview.organization_id == organization_id)
        )
        active_count = await db.scalar(
            select(func.count(Interview.id)).where(
                Interview.organization_id == organization_id,
                Interview.is_active.is_(True),
            )
        )
        response_count = await db.scalar(
            select(func.count(Response.id))
            .join(Interview, Response.interview_id == Interview.id)
            .where(Interview.organization_id == organization_id)
        )
        candidate_count = await db.scalar(
            select(func.count(Candidate.id)).where(
                Candidate.organization_id == organization_id)
        )
        average_ats = await db.scalar(
            select(func.avg(Candidate.ats_score)).where(
                Candidate.organization_id == organization_id)
        )

        return {
            "organization_id": organization_id,
            "total_interviews": interview_count or 0,
            "active_interviews": active_count or 0,
            "total_responses": response_count or 0,
            "total_candidates": candidate_count or 0,
            "average_ats_score": round(float(average_ats), 1) if average_ats is not None else None,
        }
