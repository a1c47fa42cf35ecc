"""Shared FastAPI dependencies for v1 endpoints."""

import logging
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from foloup.core.database import get_db
from foloup.core.security import decode_access_token
from foloup.models.candidate import Candidate
from foloup.models.interview import Interview
from foloup.models.user import User
from foloup.services.ai_provider_preferences import resolve_provider
from foloup.services.ai_service import AIServiceError

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

AI_ERROR_MESSAGES = {
    status.HTTP_429_TOO_MANY_REQUESTS: "API quota exceeded. Please check your AI provider billing and try again later.",
    status.HTTP_401_UNAUTHORIZED: "API authentication failed",
    status.HTTP_400_BAD_REQUEST: "Invalid request to AI service",
    status.HTTP_503_SERVICE_UNAVAILABLE: "AI service temporarily unavailable",
}


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the recruiter behind the bearer token."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise credentials_exception

    payload = decode_access_token(credentials.credentials)
    if payload is None or payload.get("sub") is None:
        raise credentials_exception

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise credentials_exception

    user = await db.get(User, user_id)
    if user is None or not user.is_active:
        raise credentials_exception
    return user


async def get_provider(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> str:
    """LLM provider for this recruiter: their preference, then the organization's."""
    return await resolve_provider(db, user.organization_id, user.id)


def ai_error_to_http(error: AIServiceError) -> HTTPException:
    """Translate a provider failure into the HTTP error returned to the client."""
    if error.status_code in AI_ERROR_MESSAGES:
        return HTTPException(
            status_code=error.status_code,
            detail={
                "error": AI_ERROR_MESSAGES[error.status_code],
                "details": error.message,
                "provider": error.provider,
            },
        )

    logger.error(f"AI service error ({error.provider}): {error.message}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"error": "Internal server error", "details": error.message},
    )


async def get_org_interview(
    db: AsyncSession, interview_id: int, organization_id: str
) -> Interview:
    """Load an interview owned by the organization or raise 404."""
    result = await db.execute(
        select(Interview).where(
            Interview.id == interview_id,
            Interview.organization_id == organization_id,
        )
    )
    interview = result.scalar_one_or_none()
    if not interview:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Interview not found",
        )
    return interview


async def get_org_candidate(
    db: AsyncSession, candidate_id: int, organization_id: str
) -> Candidate:
    """Load a candidate owned by the organization or raise 404."""
    result = await db.execute(
        select(Candidate).where(
            Candidate.id == candidate_id,
            Candidate.organization_id == organization_id,
        )
    )
    candidate = result.scalar_one_or_none()
    if not candidate:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Candidate not found",
        )
    return candidate
