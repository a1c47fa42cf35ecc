"""Interview management endpoints."""

import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from foloup.core.database import get_db
from foloup.models.user import User
from foloup.models.interview import Interview
from foloup.schemas.interview import (
    GenerateQuestionsRequest,
    GenerateQuestionsResponse,
    InsightsResponse,
    InterviewCreate,
    InterviewResponse,
    InterviewStats,
    InterviewUpdate,
)
from foloup.services.ai_service import AIService, AIServiceError, get_ai_service
from foloup.services.analytics_service import InsufficientDataError, InterviewAnalytics
from foloup.services.question_generator import QuestionGenerator
from foloup.api.v1.dependencies import (
    ai_error_to_http,
    get_current_user,
    get_org_interview,
    get_provider,
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=InterviewResponse, status_code=status.HTTP_201_CREATED)
async def create_interview(
    interview_data: InterviewCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Create a new interview."""
    questions = [q.model_dump() for q in interview_data.questions]
    interview = Interview(
        organization_id=user.organization_id,
        user_id=user.id,
        name=interview_data.name,
        objective=interview_data.objective,
        description=interview_data.description,
        job_description=interview_data.job_description,
        questions=questions,
        question_count=len(questions),
        difficulty=interview_data.difficulty,
        is_active=interview_data.is_active,
    )

    db.add(interview)
    await db.commit()
    await db.refresh(interview)

    logger.info(f"Created interview {interview.id} in {user.organization_id}")
    return interview


@router.get("/", response_model=list[InterviewResponse])
async def list_interviews(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List all interviews of the current organization."""
    result = await db.execute(
        select(Interview)
        .where(Interview.organization_id == user.organization_id)
        .order_by(Interview.created_at.desc(), Interview.id.desc())
    )
    return result.scalars().all()


@router.post("/generate-questions", response_model=GenerateQuestionsResponse)
async def generate_questions(
    data: GenerateQuestionsRequest,
    provider: str = Depends(get_provider),
    ai_service: AIService = Depends(get_ai_service),
):
    """Generate interview questions from a job title and description."""
    generator = QuestionGenerator(ai_service)

    try:
        question_set = await generator.generate_questions(
            job_title=data.job_title,
            job_description=data.job_description,
            question_count=data.question_count,
            difficulty=data.difficulty,
            provider=provider,
        )
    except AIServiceError as e:
        raise ai_error_to_http(e)
    except ValueError as e:
        logger.error(f"Error generating questions: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate interview questions",
        )

    if not question_set.questions:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="No questions were generated",
        )

    return GenerateQuestionsResponse(
        questions=[q.model_dump() for q in question_set.questions],
        description=question_set.description,
        provider=provider,
        count=len(question_set.questions),
    )


@router.get("/{interview_id}", response_model=InterviewResponse)
async def get_interview(
    interview_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get a specific interview by ID."""
    return await get_org_interview(db, interview_id, user.organization_id)


@router.patch("/{interview_id}", response_model=InterviewResponse)
async def update_interview(
    interview_id: int,
    interview_data: InterviewUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Update the fields sent in the request."""
    interview = await get_org_interview(db, interview_id, user.organization_id)

    changes = interview_data.model_dump(exclude_unset=True)
    if "questions" in changes:
        questions = changes.pop("questions") or []
        interview.questions = questions
        interview.question_count = len(questions)
    for field, value in changes.items():
        setattr(interview, field, value)

    await db.commit()
    await db.refresh(interview)
    return interview


@router.delete("/{interview_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_interview(
    interview_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete an interview with its candidates and responses."""
    interview = await get_org_interview(db, interview_id, user.organization_id)
    await db.delete(interview)
    await db.commit()
    logger.info(f"Deleted interview {interview_id}")


@router.post("/{interview_id}/insights", response_model=InsightsResponse)
async def generate_insights(
    interview_id: int,
    user: User = Depends(get_current_user),
    provider: str = Depends(get_provider),
    db: AsyncSession = Depends(get_db),
    ai_service: AIService = Depends(get_ai_service),
):
    """Summarise all call summaries of the interview into insights."""
    interview = await get_org_interview(db, interview_id, user.organization_id)
    analytics = InterviewAnalytics(ai_service)

    try:
        insights = await analytics.generate_insights(interview, db, provider)
    except AIServiceError as e:
        raise ai_error_to_http(e)
    except InsufficientDataError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except ValueError as e:
        logger.error(f"Error generating insights for interview {interview_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate insights",
        )

    return InsightsResponse(interview_id=interview.id, insights=insights, provider=provider)


@router.get("/{interview_id}/analytics", response_model=InterviewStats)
async def get_interview_analytics(
    interview_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Response statistics for an interview."""
    await get_org_interview(db, interview_id, user.organization_id)
    return await InterviewAnalytics().get_interview_stats(interview_id, db)
