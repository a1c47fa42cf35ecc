"""Per-user and per-organization AI provider preferences."""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from foloup.models.ai_provider_preference import AIProviderPreference
from foloup.services.ai_service import DEFAULT_PROVIDER, SUPPORTED_PROVIDERS

logger = logging.getLogger(__name__)


async def get_user_preference(
    db: AsyncSession, organization_id: str, user_id: int
) -> Optional[AIProviderPreference]:
    result = await db.execute(
        select(AIProviderPreference)
        .where(
            AIProviderPreference.organization_id == organization_id,
            AIProviderPreference.user_id == user_id,
            AIProviderPreference.is_active.is_(True),
        )
        .order_by(AIProviderPreference.updated_at.desc(), AIProviderPreference.id.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def get_organization_preference(
    db: AsyncSession, organization_id: str
) -> Optional[AIProviderPreference]:
    """Most recently updated active preference in the organization."""
    result = await db.execute(
        select(AIProviderPreference)
        .where(
            AIProviderPreference.organization_id == organization_id,
            AIProviderPreference.is_active.is_(True),
        )
        .order_by(AIProviderPreference.updated_at.desc(), AIProviderPreference.id.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def set_user_preference(
    db: AsyncSession, organization_id: str, user_id: int, provider: str
) -> AIProviderPreference:
    if provider not in SUPPORTED_PROVIDERS:
        raise ValueError(f"Invalid provider: {provider}")

    preference = await get_user_preference(db, organization_id, user_id)
    if preference:
        preference.preferred_provider = provider
        preference.updated_at = datetime.now(timezone.utc)
    else:
        preference = AIProviderPreference(
            organization_id=organization_id,
            user_id=user_id,
            preferred_provider=provider,
            is_active=True,
        )
        db.add(preference)

    await db.commit()
    await db.refresh(preference)
    logger.info(f"AI provider preference for user {user_id} in {organization_id}: {provider}")
    return preference


async def delete_user_preference(
    db: AsyncSession, organization_id: str, user_id: int
) -> bool:
    """Deactivate the user's preferences. Returns False if none were active."""
    result = await db.execute(
        update(AIProviderPreference)
        .where(
            AIProviderPreference.organization_id == organization_id,
            AIProviderPreference.user_id == user_id,
            AIProviderPreference.is_active.is_(True),
        )
        .values(is_active=False)
    )
    await db.commit()
    return result.rowcount > 0


async def resolve_preference(
    db: AsyncSession, organization_id: str, user_id: int
) -> Optional[AIProviderPreference]:
    """User preference first, then the organization's."""
    preference = await get_user_preference(db, organization_id, user_id)
    if preference is None:
        preference = await get_organization_preference(db, organization_id)
    return preference


async def resolve_provider(db: AsyncSession, organization_id: str, user_id: int) -> str:
    """Provider to use for a recruiter's request."""
    try:
        preference = await resolve_preference(db, organization_id, user_id)
    except SQLAlchemyError as e:
        logger.error(f"Error fetching AI provider preference: {e}")
        return DEFAULT_PROVIDER

    if preference is None:
        logger.info(f"No AI provider preference for {organization_id}, using {DEFAULT_PROVIDER}")
        return DEFAULT_PROVIDER
    return preference.preferred_provider
