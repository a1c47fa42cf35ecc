"""Interview response (call) endpoints."""

import logging
from typing import Optional
from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import func, select

from foloup.core.database import get_db
from foloup.models.user import User
from foloup.models.interview import Interview
from foloup.models.response import Response
from foloup.schemas.response import (
    AnalyticsRequest,
    CommunicationRequest,
    ResponseCount,
    ResponseOut,
    ResponseUpdate,
)
from foloup.services import candidate_links
from foloup.services.ai_service import AIService, AIServiceError, get_ai_service
from foloup.services.analytics_service import InsufficientDataError, InterviewAnalytics
from foloup.api.v1.dependencies import (
    ai_error_to_http,
    get_current_user,
    get_org_interview,
    get_provider,
)

logger = logging.getLogger(__name__)
router = APIRouter()


async def _get_org_response(db: AsyncSession, call_id: str, organization_id: str) -> Response:
    result = await db.execute(
        select(Response)
        .join(Interview, Response.interview_id == Interview.id)
        .where(Response.call_id == call_id, Interview.organization_id == organization_id)
    )
    response = result.scalar_one_or_none()

    if not response:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Response not found",
        )
    return response


@router.get("/", response_model=list[ResponseOut])
async def list_responses(
    interview_id: int = Query(...),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List the responses of an interview, newest first."""
    await get_org_interview(db, interview_id, user.organization_id)
    result = await db.execute(
        select(Response)
        .where(Response.interview_id == interview_id)
        .order_by(Response.created_at.desc(), Response.id.desc())
    )
    return result.scalars().all()


@router.get("/count", response_model=ResponseCount)
async def count_responses(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Number of responses across the organization's interviews."""
    count = await db.scalar(
        select(func.count(Response.id))
        .join(Interview, Response.interview_id == Interview.id)
        .where(Interview.organization_id == user.organization_id)
    )
    return ResponseCount(organization_id=user.organization_id, count=count or 0)


@router.post("/analyze-communication")
async def analyze_communication(
    data: CommunicationRequest,
    provider: str = Depends(get_provider),
    ai_service: AIService = Depends(get_ai_service),
):
    """Communication-skills analysis of a transcript."""
    if not data.transcript:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Transcript is required",
        )

    try:
        analysis = await InterviewAnalytics(ai_service).analyze_communication(
            data.transcript, provider)
    except AIServiceError as e:
        raise ai_error_to_http(e)
    except ValueError as e:
        logger.error(f"Error analyzing communication: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to analyze communication",
        )

    return {"analysis": analysis, "provider": provider}


@router.get("/{call_id}", response_model=ResponseOut)
async def get_response(
    call_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get a response by its call id."""
    return await _get_org_response(db, call_id, user.organization_id)


@router.patch("/{call_id}", response_model=ResponseOut)
async def update_response(
    call_id: str,
    response_data: ResponseUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Update details, end state or duration of a call."""
    response = await _get_org_response(db, call_id, user.organization_id)
    for field, value in response_data.model_dump(exclude_unset=True).items():
        setattr(response, field, value)

    await db.commit()
    await db.refresh(response)
    return response


@router.delete("/{call_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_response(
    call_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete a response."""
    response = await _get_org_response(db, call_id, user.organization_id)
    await candidate_links.detach_response(db, response.id)
    await db.delete(response)
    await db.commit()


@router.post("/{call_id}/analytics")
async def generate_response_analytics(
    call_id: str,
    data: Optional[AnalyticsRequest] = Body(None),
    user: User = Depends(get_current_user),
    provider: str = Depends(get_provider),
    db: AsyncSession = Depends(get_db),
    ai_service: AIService = Depends(get_ai_service),
):
    """
    Generate analytics for a call.

    Stored analytics are returned as they are once they carry an overall
    score. The transcript in the request takes precedence over the stored one.
    """
    response = await _get_org_response(db, call_id, user.organization_id)
    interview = await get_org_interview(db, response.interview_id, user.organization_id)

    try:
        analytics = await InterviewAnalytics(ai_service).generate_response_analytics(
            response,
            interview,
            db,
            transcript=data.transcript if data else None,
            provider=provider,
        )
    except AIServiceError as e:
        raise ai_error_to_http(e)
    except InsufficientDataError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except ValueError as e:
        logger.error(f"Error generating analytics for call {call_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate analytics",
        )

    return {"analytics": analytics}
