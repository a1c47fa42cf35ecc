"""ATS resume matching endpoints."""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, Optional
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from foloup.core.config import settings
from foloup.models.user import User
from foloup.schemas.ats import FileMatchResult, MultipleMatchResponse
from foloup.services.ai_service import AIService, AIServiceError, get_ai_service
from foloup.services.ats_matcher import (
    ATSMatcher,
    ATSMatchResult,
    ContactInfo,
    KeywordMatch,
    analyze_resume_keywords,
)
from foloup.services.document_parser import (
    FileTooLargeError,
    is_allowed_file,
    parse_document_async,
    save_upload,
)
from foloup.api.v1.dependencies import get_current_user, get_provider

logger = logging.getLogger(__name__)
router = APIRouter()

PROCESSING_ERROR = "Failed to parse or process documents"


def _check_extensions(*uploads: UploadFile) -> None:
    for upload in uploads:
        if not is_allowed_file(upload.filename):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Only PDF and Word files are allowed",
            )


def _check_resume_count(resumes: list[UploadFile]) -> None:
    if len(resumes) > settings.ATS_MAX_RESUMES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"At most {settings.ATS_MAX_RESUMES} resumes can be matched at once",
        )


async def _read_upload(upload: UploadFile) -> str:
    """Store an upload under the ATS directory and return its text."""
    path, _ = await save_upload(
        upload, Path(settings.UPLOAD_DIR) / "ats", settings.MAX_UPLOAD_SIZE)
    return await parse_document_async(path)


async def _read_single(upload: UploadFile) -> str:
    """Like ``_read_upload`` but an oversized file rejects the whole request."""
    try:
        return await _read_upload(upload)
    except FileTooLargeError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


async def _match_many(
    matcher: ATSMatcher,
    jd_text: str,
    resumes: list[UploadFile],
    provider: str,
) -> list[FileMatchResult]:
    async def match_one(upload: UploadFile) -> FileMatchResult:
        try:
            resume_text = await _read_upload(upload)
            result = await matcher.match_resume_to_jd(jd_text, resume_text, provider)
            return FileMatchResult(file=upload.filename or "", result=result)
        except (ValueError, AIServiceError) as e:
            logger.warning(f"Failed to match resume {upload.filename}: {e}")
            return FileMatchResult(
                file=upload.filename or "", error="Failed to parse or match resume")

    return list(await asyncio.gather(*(match_one(upload) for upload in resumes)))


@router.post("/match", response_model=ATSMatchResult)
async def match_resume(
    resume: Annotated[Optional[UploadFile], File()] = None,
    jd: Annotated[Optional[UploadFile], File()] = None,
    provider: str = Depends(get_provider),
    ai_service: AIService = Depends(get_ai_service),
):
    """Match one resume file against one job description file."""
    if resume is None or jd is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Both resume and JD files are required",
        )
    _check_extensions(resume, jd)

    try:
        resume_text = await _read_single(resume)
        jd_text = await _read_single(jd)
        return await ATSMatcher(ai_service).match_resume_to_jd(jd_text, resume_text, provider)
    except (ValueError, AIServiceError) as e:
        logger.error(f"Error matching {resume.filename} to {jd.filename}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=PROCESSING_ERROR,
        )


@router.post("/match/multiple", response_model=MultipleMatchResponse)
async def match_multiple_resumes(
    resume: Annotated[Optional[list[UploadFile]], File()] = None,
    jd: Annotated[Optional[UploadFile], File()] = None,
    provider: str = Depends(get_provider),
    ai_service: AIService = Depends(get_ai_service),
):
    """Match several resumes against one job description file."""
    if jd is None or not resume:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Both resume(s) and JD file are required",
        )
    _check_resume_count(resume)
    _check_extensions(jd, *resume)

    try:
        jd_text = await _read_single(jd)
    except ValueError as e:
        logger.error(f"Error parsing job description {jd.filename}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=PROCESSING_ERROR,
        )

    results = await _match_many(ATSMatcher(ai_service), jd_text, resume, provider)
    return MultipleMatchResponse(jd=jd.filename or "", results=results)


@router.post("/match/text", response_model=ATSMatchResult)
async def match_resume_to_text(
    resume: Annotated[Optional[UploadFile], File()] = None,
    job_description: Annotated[Optional[str], Form(alias="jobDescription")] = None,
    provider: str = Depends(get_provider),
    ai_service: AIService = Depends(get_ai_service),
):
    """Match one resume file against a pasted job description."""
    if resume is None or not job_description:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Both resume file and job description are required",
        )
    _check_extensions(resume)

    try:
        resume_text = await _read_single(resume)
        return await ATSMatcher(ai_service).match_resume_to_jd(
            job_description, resume_text, provider)
    except (ValueError, AIServiceError) as e:
        logger.error(f"Error processing resume {resume.filename} with text JD: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=PROCESSING_ERROR,
        )


@router.post("/match/multiple/text", response_model=MultipleMatchResponse)
async def match_multiple_resumes_to_text(
    resume: Annotated[Optional[list[UploadFile]], File()] = None,
    job_description: Annotated[Optional[str], Form(alias="jobDescription")] = None,
    provider: str = Depends(get_provider),
    ai_service: AIService = Depends(get_ai_service),
):
    """Match several resumes against a pasted job description."""
    if not resume or not job_description:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Both resume file(s) and job description are required",
        )
    _check_resume_count(resume)
    _check_extensions(*resume)

    results = await _match_many(ATSMatcher(ai_service), job_description, resume, provider)
    return MultipleMatchResponse(jd="text", results=results)


@router.post("/contact-info", response_model=ContactInfo)
async def extract_contact_info(
    resume: Annotated[Optional[UploadFile], File()] = None,
    provider: str = Depends(get_provider),
    ai_service: AIService = Depends(get_ai_service),
):
    """Pull name, email and phone out of a resume."""
    if resume is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Resume file is required",
        )
    _check_extensions(resume)

    try:
        resume_text = await _read_single(resume)
        return await ATSMatcher(ai_service).extract_contact_info(resume_text, provider)
    except (ValueError, AIServiceError) as e:
        logger.error(f"Error extracting contact info from {resume.filename}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=PROCESSING_ERROR,
        )


@router.post("/keywords", response_model=KeywordMatch)
async def keyword_match(
    resume: Annotated[Optional[UploadFile], File()] = None,
    job_description: Annotated[Optional[str], Form(alias="jobDescription")] = None,
    user: User = Depends(get_current_user),
):
    """TF-IDF similarity between a resume and a pasted job description."""
    if resume is None or not job_description:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Both resume file and job description are required",
        )
    _check_extensions(resume)

    try:
        resume_text = await _read_single(resume)
    except ValueError as e:
        logger.error(f"Error parsing resume {resume.filename}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=PROCESSING_ERROR,
        )

    return analyze_resume_keywords(resume_text, job_description)
