"""Resume upload and analysis endpoints."""

import logging
import time
from pathlib import Path
from typing import Annotated, Optional
from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    status,
    UploadFile,
    File,
    Form,
    Query,
)
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from foloup.core.database import get_db
from foloup.core.config import settings
from foloup.models.user import User
from foloup.models.resume import Resume, ResumeAnalysis
from foloup.schemas.resume import ResumeAnalysisResponse, ResumeResponse
from foloup.services.ai_service import AIService, AIServiceError, get_ai_service
from foloup.services.document_parser import (
    ALLOWED_EXTENSIONS,
    FileTooLargeError,
    is_allowed_file,
    parse_document_async,
    save_upload,
)
from foloup.services.resume_analyzer import ResumeAnalyzer
from foloup.api.v1.dependencies import (
    ai_error_to_http,
    get_current_user,
    get_org_candidate,
    get_org_interview,
    get_provider,
)

logger = logging.getLogger(__name__)
router = APIRouter()

RESUME_EXTENSIONS = ALLOWED_EXTENSIONS | {".txt"}


async def _get_org_resume(db: AsyncSession, resume_id: int, organization_id: str) -> Resume:
    result = await db.execute(
        select(Resume).where(
            Resume.id == resume_id, Resume.organization_id == organization_id)
    )
    resume = result.scalar_one_or_none()

    if not resume:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Resume not found",
        )
    return resume


@router.post("/upload", response_model=ResumeResponse, status_code=status.HTTP_201_CREATED)
async def upload_resume(
    file: Annotated[UploadFile, File(...)],
    candidate_id: Annotated[int, Form()],
    interview_id: Annotated[int, Form()],
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Upload a candidate's resume (PDF, Word or plain text) and extract its text."""
    await get_org_candidate(db, candidate_id, user.organization_id)
    await get_org_interview(db, interview_id, user.organization_id)

    if not is_allowed_file(file.filename, RESUME_EXTENSIONS):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid file type. Only PDF, Word and text files are supported.",
        )

    # Stored as <millis><ext> under the candidate's directory
    filename = file.filename or "resume"
    stored_name = f"{int(time.time() * 1000)}{Path(filename).suffix.lower()}"
    upload_dir = Path(settings.UPLOAD_DIR) / "resumes" / str(candidate_id)

    try:
        file_path, file_size = await save_upload(
            file, upload_dir, settings.MAX_UPLOAD_SIZE, filename=stored_name)
    except FileTooLargeError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    resume = Resume(
        organization_id=user.organization_id,
        candidate_id=candidate_id,
        interview_id=interview_id,
        filename=filename,
        file_url=f"/uploads/resumes/{candidate_id}/{stored_name}",
        file_size=file_size,
        status="pending",
    )

    try:
        resume.parsed_content = await parse_document_async(file_path)
    except ValueError as e:
        logger.error(f"Text extraction failed for {filename}: {e}")
        resume.status = "failed"
        resume.processing_notes = str(e)

    db.add(resume)
    await db.commit()
    await db.refresh(resume)
    return resume


@router.get("/", response_model=list[ResumeResponse])
async def list_resumes(
    candidate_id: Optional[int] = Query(None),
    interview_id: Optional[int] = Query(None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List resumes of the organization, optionally by candidate or interview."""
    query = select(Resume).where(Resume.organization_id == user.organization_id)
    if candidate_id is not None:
        query = query.where(Resume.candidate_id == candidate_id)
    if interview_id is not None:
        query = query.where(Resume.interview_id == interview_id)

    result = await db.execute(query.order_by(Resume.uploaded_at.desc(), Resume.id.desc()))
    return result.scalars().all()


@router.get("/{resume_id}", response_model=ResumeResponse)
async def get_resume(
    resume_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get a specific resume by ID."""
    return await _get_org_resume(db, resume_id, user.organization_id)


@router.post("/{resume_id}/analyze", response_model=ResumeAnalysisResponse)
async def analyze_resume(
    resume_id: int,
    user: User = Depends(get_current_user),
    provider: str = Depends(get_provider),
    db: AsyncSession = Depends(get_db),
    ai_service: AIService = Depends(get_ai_service),
):
    """Score the resume against its interview and store the analysis."""
    resume = await _get_org_resume(db, resume_id, user.organization_id)
    interview = await get_org_interview(db, resume.interview_id, user.organization_id)

    if not resume.parsed_content:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Resume has no parsed content. Upload a readable file first.",
        )

    try:
        return await ResumeAnalyzer(ai_service).analyze(resume, interview, provider, db)
    except AIServiceError as e:
        raise ai_error_to_http(e)


@router.get("/{resume_id}/analyses", response_model=list[ResumeAnalysisResponse])
async def list_resume_analyses(
    resume_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """All analyses of a resume, newest first."""
    await _get_org_resume(db, resume_id, user.organization_id)
    result = await db.execute(
        select(ResumeAnalysis)
        .where(ResumeAnalysis.resume_id == resume_id)
        .order_by(ResumeAnalysis.created_at.desc(), ResumeAnalysis.id.desc())
    )
    return result.scalars().all()
