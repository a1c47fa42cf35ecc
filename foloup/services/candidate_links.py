"""Candidate interview links: single-use, optionally expiring invitations."""

import logging
import secrets
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from foloup.core.config import settings
from foloup.models.candidate import Candidate
from foloup.models.interview import Interview
from foloup.models.interview_link import CandidateInterviewLink
from foloup.models.response import Response

logger = logging.getLogger(__name__)

LINK_ID_ALPHABET = "useandom-26T198340PX75pxJACKVERYMINDBUSHWOLF_GQZbfghjklqvwyzrict"
LINK_ID_LENGTH = 16

LINK_STATUSES = ("active", "expired", "completed")


class LinkValidationError(Exception):
    """Raised when a candidate link cannot be used to take the interview."""

    def __init__(self, reason: str, message: str) -> None:
        super().__init__(message)
        self.reason = reason
        self.message = message


def generate_link_id(length: int = LINK_ID_LENGTH) -> str:
    return "".join(secrets.choice(LINK_ID_ALPHABET) for _ in range(length))


def build_link_url(unique_link_id: str) -> str:
    return f"{settings.LIVE_URL.rstrip('/')}/interview/{unique_link_id}"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive timestamps (SQLite) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_past_expiry(link: CandidateInterviewLink, now: Optional[datetime] = None) -> bool:
    if link.expires_at is None:
        return False
    return as_utc(link.expires_at) < (now or utcnow())


async def create_link(
    db: AsyncSession,
    candidate_id: int,
    interview_id: int,
    organization_id: str,
    expires_at: Optional[datetime] = None,
    notes: Optional[str] = None,
    created_by: Optional[int] = None,
) -> CandidateInterviewLink:
    unique_link_id = generate_link_id()
    link = CandidateInterviewLink(
        candidate_id=candidate_id,
        interview_id=interview_id,
        organization_id=organization_id,
        unique_link_id=unique_link_id,
        link_url=build_link_url(unique_link_id),
        status="active",
        expires_at=as_utc(expires_at) if expires_at else None,
        notes=notes,
        created_by=created_by,
    )
    db.add(link)
    await db.commit()
    await db.refresh(link)
    logger.info(f"Created interview link {unique_link_id} for candidate {candidate_id}")
    return link


async def list_for_candidate(db: AsyncSession, candidate_id: int) -> list[CandidateInterviewLink]:
    result = await db.execute(
        select(CandidateInterviewLink)
        .where(CandidateInterviewLink.candidate_id == candidate_id)
        .order_by(CandidateInterviewLink.created_at.desc(), CandidateInterviewLink.id.desc())
    )
    return list(result.scalars().all())


async def list_for_interview(db: AsyncSession, interview_id: int) -> list[CandidateInterviewLink]:
    result = await db.execute(
        select(CandidateInterviewLink)
        .where(CandidateInterviewLink.interview_id == interview_id)
        .order_by(CandidateInterviewLink.created_at.desc(), CandidateInterviewLink.id.desc())
    )
    return list(result.scalars().all())


async def get_by_unique_id(db: AsyncSession, unique_link_id: str) -> Optional[CandidateInterviewLink]:
    result = await db.execute(
        select(CandidateInterviewLink).where(
            CandidateInterviewLink.unique_link_id == unique_link_id)
    )
    return result.scalar_one_or_none()


async def update_status(
    db: AsyncSession,
    link: CandidateInterviewLink,
    status: str,
    response_id: Optional[int] = None,
) -> CandidateInterviewLink:
    if status not in LINK_STATUSES:
        raise ValueError(f"Invalid link status: {status}")

    link.status = status
    if status == "completed":
        link.completed_at = utcnow()
    if response_id:
        link.response_id = response_id

    await db.commit()
    await db.refresh(link)
    return link


async def expire_expired_links(db: AsyncSession) -> int:
    """Mark active links whose expiry date has passed as expired."""
    result = await db.execute(
        update(CandidateInterviewLink)
        .where(
            CandidateInterviewLink.status == "active",
            CandidateInterviewLink.expires_at.is_not(None),
            CandidateInterviewLink.expires_at < utcnow(),
        )
        .values(status="expired")
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    if result.rowcount:
        logger.info(f"Expired {result.rowcount} interview links")
    return result.rowcount


async def detach_response(db: AsyncSession, response_id: int) -> None:
    """Clear the response reference of links completed with this response."""
    await db.execute(
        update(CandidateInterviewLink)
        .where(CandidateInterviewLink.response_id == response_id)
        .values(response_id=None)
        .execution_options(synchronize_session=False)
    )


async def delete_link(db: AsyncSession, link: CandidateInterviewLink) -> None:
    await db.delete(link)
    await db.commit()


async def validate_link(
    db: AsyncSession, unique_link_id: str
) -> tuple[CandidateInterviewLink, Interview]:
    """Check that a candidate may start the interview behind this link."""
    link = await get_by_unique_id(db, unique_link_id)
    if link is None:
        raise LinkValidationError(
            "invalid", "Invalid interview link. Please check the URL and try again.")

    if link.status == "expired":
        raise LinkValidationError(
            "expired",
            "This interview link has expired. Please contact the interviewer for a new link.",
        )

    if is_past_expiry(link):
        raise LinkValidationError(
            "expired",
            "This interview link has passed its expiration date. "
            "Please contact the interviewer for a new link.",
        )

    if link.status == "completed":
        raise LinkValidationError("completed", "This interview has already been completed.")

    interview = await db.get(Interview, link.interview_id)
    if interview is None:
        raise LinkValidationError(
            "interview_not_found", "Interview not found. Please contact the interviewer.")

    if not interview.is_active:
        raise LinkValidationError(
            "inactive",
            "This interview is currently inactive. Please contact the interviewer.",
        )

    candidate = await db.get(Candidate, link.candidate_id)
    if candidate is not None and candidate.email:
        result = await db.execute(
            select(func.count(Response.id)).where(
                Response.interview_id == link.interview_id,
                func.lower(Response.email) == candidate.email.lower(),
            )
        )
        if result.scalar_one() > 0:
            raise LinkValidationError(
                "completed", "You have already completed this interview.")

    return link, interview
