"""Candidate interview link endpoints."""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from foloup.core.database import get_db
from foloup.models.user import User
from foloup.models.interview_link import CandidateInterviewLink
from foloup.schemas.interview_link import (
    CandidateLinkCreate,
    CandidateLinkResponse,
    ExpireLinksResponse,
)
from foloup.services import candidate_links
from foloup.api.v1.dependencies import get_current_user, get_org_candidate, get_org_interview

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=CandidateLinkResponse, status_code=status.HTTP_201_CREATED)
async def create_candidate_link(
    link_data: CandidateLinkCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Create a unique interview link for a candidate."""
    await get_org_candidate(db, link_data.candidate_id, user.organization_id)
    await get_org_interview(db, link_data.interview_id, user.organization_id)

    return await candidate_links.create_link(
        db,
        candidate_id=link_data.candidate_id,
        interview_id=link_data.interview_id,
        organization_id=user.organization_id,
        expires_at=link_data.expires_at,
        notes=link_data.notes,
        created_by=user.id,
    )


@router.get("/", response_model=list[CandidateLinkResponse])
async def list_candidate_links(
    candidate_id: Optional[int] = Query(None),
    interview_id: Optional[int] = Query(None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List links of a candidate or of an interview, newest first."""
    if candidate_id is not None:
        await get_org_candidate(db, candidate_id, user.organization_id)
        return await candidate_links.list_for_candidate(db, candidate_id)
    if interview_id is not None:
        await get_org_interview(db, interview_id, user.organization_id)
        return await candidate_links.list_for_interview(db, interview_id)

    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Either candidate_id or interview_id is required",
    )


@router.post("/expire", response_model=ExpireLinksResponse)
async def expire_links(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Mark every active link past its expiry date as expired."""
    return ExpireLinksResponse(expired=await candidate_links.expire_expired_links(db))


@router.delete("/{link_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_candidate_link(
    link_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete a candidate link."""
    result = await db.execute(
        select(CandidateInterviewLink).where(
            CandidateInterviewLink.id == link_id,
            CandidateInterviewLink.organization_id == user.organization_id,
        )
    )
    link = result.scalar_one_or_none()

    if not link:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Link not found",
        )

    await candidate_links.delete_link(db, link)
