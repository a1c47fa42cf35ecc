"""Candidate management and bulk resume screening endpoints."""

import asyncio
import logging
import time
from pathlib import Path
from typing import Annotated, Optional
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from foloup.core.config import settings
from foloup.core.database import get_db
from foloup.models.user import User
from foloup.models.candidate import Candidate
from foloup.schemas.candidate import (
    BulkUploadResponse,
    BulkUploadResult,
    CandidateCreate,
    CandidateResponse,
    CandidateUpdate,
)
from foloup.services.ai_service import AIService, AIServiceError, get_ai_service
from foloup.services.ats_matcher import NOT_FOUND, ATSMatcher, ContactInfo
from foloup.services.document_parser import is_allowed_file, parse_document_async, save_upload
from foloup.api.v1.dependencies import (
    get_current_user,
    get_org_candidate,
    get_org_interview,
    get_provider,
)

logger = logging.getLogger(__name__)
router = APIRouter()

NO_CONTACT_INFO_ERROR = (
    "Could not extract contact information from resume. "
    "Please ensure the resume contains valid contact details."
)


def clean_file_name(filename: str) -> str:
    """File name without its extension, used when no candidate name is known."""
    return Path(filename).stem or filename


@router.post("/", response_model=CandidateResponse, status_code=status.HTTP_201_CREATED)
async def create_candidate(
    candidate_data: CandidateCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Create a candidate for one of the organization's interviews."""
    await get_org_interview(db, candidate_data.interview_id, user.organization_id)

    candidate = Candidate(organization_id=user.organization_id, **candidate_data.model_dump())
    db.add(candidate)
    await db.commit()
    await db.refresh(candidate)
    return candidate


@router.get("/", response_model=list[CandidateResponse])
async def list_candidates(
    interview_id: Optional[int] = Query(None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List candidates, optionally for a single interview."""
    query = select(Candidate).where(Candidate.organization_id == user.organization_id)
    if interview_id is not None:
        query = query.where(Candidate.interview_id == interview_id)

    result = await db.execute(
        query.order_by(Candidate.created_at.desc(), Candidate.id.desc()))
    return result.scalars().all()


@router.post("/bulk-upload", response_model=BulkUploadResponse)
async def bulk_upload(
    interview_id: Annotated[int, Form()],
    files: Annotated[list[UploadFile], File()],
    user: User = Depends(get_current_user),
    provider: str = Depends(get_provider),
    db: AsyncSession = Depends(get_db),
    ai_service: AIService = Depends(get_ai_service),
):
    """
    Screen several resumes against an interview and save the candidates.

    Each resume is matched against the interview requirements and its contact
    details are extracted. Resumes without a name and email are reported but
    not saved.
    """
    interview = await get_org_interview(db, interview_id, user.organization_id)
    requirements = interview.requirements_text
    if not requirements:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Interview has no job description to match resumes against",
        )

    if not files:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="At least one resume file is required",
        )
    if len(files) > settings.ATS_MAX_RESUMES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"At most {settings.ATS_MAX_RESUMES} resumes can be uploaded at once",
        )
    for upload in files:
        if not is_allowed_file(upload.filename):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Only PDF and Word files are allowed",
            )

    matcher = ATSMatcher(ai_service)
    upload_dir = Path(settings.UPLOAD_DIR) / "candidates" / str(interview.id)

    async def screen(upload: UploadFile) -> tuple[BulkUploadResult, Optional[ContactInfo], Optional[Path]]:
        filename = upload.filename or "resume"
        try:
            path, _ = await save_upload(upload, upload_dir, settings.MAX_UPLOAD_SIZE)
            resume_text = await parse_document_async(path)
            match = await matcher.match_resume_to_jd(requirements, resume_text, provider)
        except (ValueError, AIServiceError) as e:
            logger.warning(f"Failed to screen resume {filename}: {e}")
            return BulkUploadResult(
                file=filename, error="Failed to parse or match resume"), None, None

        outcome = BulkUploadResult(
            file=filename, candidate_name=clean_file_name(filename), result=match)
        try:
            contact = await matcher.extract_contact_info(resume_text, provider)
        except (ValueError, AIServiceError) as e:
            logger.warning(f"Could not extract contact info from {filename}: {e}")
            return outcome, None, path

        if not contact.is_found:
            logger.info(f"Contact information not found for {filename}, skipping save")
            outcome.no_contact_info = True
            outcome.error = NO_CONTACT_INFO_ERROR
            return outcome, contact, path

        outcome.candidate_name = contact.name
        return outcome, contact, path

    screened = await asyncio.gather(*(screen(upload) for upload in files))

    created = []
    for outcome, contact, path in screened:
        if outcome.result is None or outcome.no_contact_info:
            continue

        candidate = Candidate(
            organization_id=user.organization_id,
            interview_id=interview.id,
            name=outcome.candidate_name or clean_file_name(outcome.file),
            email=(
                contact.email if contact is not None
                else f"candidate-{int(time.time() * 1000)}@example.com"
            ),
            phone=contact.phone if contact is not None and contact.phone != NOT_FOUND else "",
            resume_filename=outcome.file,
            resume_file_url=str(path) if path else None,
            ats_score=outcome.result.match_score,
            ats_missing_skills=outcome.result.missing_skills,
            ats_feedback=outcome.result.feedback,
        )
        db.add(candidate)
        await db.flush()
        outcome.candidate_id = candidate.id
        created.append(candidate)

    await db.commit()
    for candidate in created:
        await db.refresh(candidate)

    logger.info(
        f"Bulk upload for interview {interview.id}: {len(files)} files, "
        f"{len(created)} candidates saved")
    return BulkUploadResponse(
        results=[outcome for outcome, _, _ in screened],
        created=[CandidateResponse.model_validate(c) for c in created],
    )


@router.get("/{candidate_id}", response_model=CandidateResponse)
async def get_candidate(
    candidate_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get a specific candidate by ID."""
    return await get_org_candidate(db, candidate_id, user.organization_id)


@router.patch("/{candidate_id}", response_model=CandidateResponse)
async def update_candidate(
    candidate_id: int,
    candidate_data: CandidateUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Update the fields sent in the request."""
    candidate = await get_org_candidate(db, candidate_id, user.organization_id)
    for field, value in candidate_data.model_dump(exclude_unset=True).items():
        setattr(candidate, field, value)

    await db.commit()
    await db.refresh(candidate)
    return candidate


@router.delete("/{candidate_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_candidate(
    candidate_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete a candidate with their links and resumes."""
    candidate = await get_org_candidate(db, candidate_id, user.organization_id)
    await db.delete(candidate)
    await db.commit()
