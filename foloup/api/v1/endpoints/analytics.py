"""Organization analytics endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from foloup.core.database import get_db
from foloup.models.user import User
from foloup.services.analytics_service import InterviewAnalytics
from foloup.api.v1.dependencies import get_current_user

router = APIRouter()


@router.get("/organization")
async def get_organization_analytics(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Headline numbers for the current organization."""
    return await InterviewAnalytics().get_organization_stats(user.organization_id, db)
