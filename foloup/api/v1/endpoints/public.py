"""Candidate-facing endpoints reached through an interview link. No authentication."""

import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from foloup.core.database import get_db
from foloup.models.candidate import Candidate
from foloup.models.response import Response
from foloup.schemas.interview_link import PublicInterview, PublicLinkResponse
from foloup.schemas.response import ResponseCreate, ResponseOut
from foloup.services.candidate_links import LinkValidationError, update_status, validate_link

logger = logging.getLogger(__name__)
router = APIRouter()

LINK_ERROR_STATUS = {
    "invalid": status.HTTP_404_NOT_FOUND,
    "interview_not_found": status.HTTP_404_NOT_FOUND,
    "expired": status.HTTP_410_GONE,
    "completed": status.HTTP_409_CONFLICT,
    "inactive": status.HTTP_403_FORBIDDEN,
}


async def _validated_link(db: AsyncSession, unique_link_id: str):
    try:
        return await validate_link(db, unique_link_id)
    except LinkValidationError as e:
        logger.info(f"Rejected interview link {unique_link_id}: {e.reason}")
        raise HTTPException(
            status_code=LINK_ERROR_STATUS.get(e.reason, status.HTTP_400_BAD_REQUEST),
            detail={"reason": e.reason, "message": e.message},
        )


@router.get("/interview/{unique_link_id}", response_model=PublicLinkResponse)
async def open_interview_link(unique_link_id: str, db: AsyncSession = Depends(get_db)):
    """Validate a link and return the interview the candidate is about to take."""
    link, interview = await _validated_link(db, unique_link_id)
    candidate = await db.get(Candidate, link.candidate_id)

    return PublicLinkResponse(
        unique_link_id=link.unique_link_id,
        status=link.status,
        expires_at=link.expires_at,
        candidate_name=candidate.name if candidate else None,
        candidate_email=candidate.email if candidate else None,
        interview=PublicInterview.model_validate(interview),
    )


@router.post(
    "/interview/{unique_link_id}/responses",
    response_model=ResponseOut,
    status_code=status.HTTP_201_CREATED,
)
async def submit_interview_response(
    unique_link_id: str,
    response_data: ResponseCreate,
    db: AsyncSession = Depends(get_db),
):
    """Record the candidate's call and close the link."""
    link, interview = await _validated_link(db, unique_link_id)

    existing = await db.execute(
        select(Response.id).where(Response.call_id == response_data.call_id))
    if existing.scalar_one_or_none() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A response with this call id already exists",
        )

    candidate = await db.get(Candidate, link.candidate_id)
    response = Response(
        interview_id=interview.id,
        call_id=response_data.call_id,
        name=response_data.name or (candidate.name if candidate else None),
        email=response_data.email or (candidate.email if candidate else None),
        candidate_link_id=link.id,
        details=response_data.details,
        is_ended=response_data.is_ended,
        duration=response_data.duration,
    )
    db.add(response)
    await db.flush()

    await update_status(db, link, "completed", response_id=response.id)
    await db.refresh(response)

    logger.info(f"Recorded response {response.call_id} for link {unique_link_id}")
    return response
