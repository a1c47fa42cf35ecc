"""AI provider preference endpoints."""

import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from foloup.core.database import get_db
from foloup.models.user import User
from foloup.schemas.ai_provider import (
    ProviderPreference,
    ProviderSelection,
    ProviderStatus,
    ProviderTest,
    ProviderUpdated,
)
from foloup.services import ai_provider_preferences as preferences
from foloup.services.ai_service import (
    DEFAULT_PROVIDER,
    SUPPORTED_PROVIDERS,
    AICompletionRequest,
    AIMessage,
    AIService,
    AIServiceError,
    get_ai_service,
)
from foloup.api.v1.dependencies import get_current_user

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=ProviderStatus)
async def get_provider_preference(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Current provider: the user's preference, then the organization's, then the default."""
    preference = await preferences.resolve_preference(db, user.organization_id, user.id)
    provider = preference.preferred_provider if preference else DEFAULT_PROVIDER
    return ProviderStatus(
        provider=provider,
        preference=ProviderPreference.model_validate(preference) if preference else None,
    )


@router.post("", response_model=ProviderUpdated)
async def set_provider_preference(
    selection: ProviderSelection,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Save the user's preferred provider."""
    if selection.provider not in SUPPORTED_PROVIDERS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid provider",
        )

    preference = await preferences.set_user_preference(
        db, user.organization_id, user.id, selection.provider)
    return ProviderUpdated(
        success=True,
        provider=preference.preferred_provider,
        preference=ProviderPreference.model_validate(preference),
    )


@router.delete("")
async def delete_provider_preference(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Remove the user's preference so the organization's applies again."""
    deleted = await preferences.delete_user_preference(db, user.organization_id, user.id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No provider preference found",
        )
    return {"success": True}


@router.get("/test", response_model=ProviderTest)
async def test_provider(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    ai_service: AIService = Depends(get_ai_service),
):
    """Send a trivial completion through the resolved provider."""
    provider = await preferences.resolve_provider(db, user.organization_id, user.id)

    try:
        response = await ai_service.create_completion(
            AICompletionRequest(
                model="gpt-4o",
                messages=[
                    AIMessage(
                        role="user",
                        content='Hello! Please respond with "OK" to confirm the connection is working.',
                    )
                ],
                max_tokens=10,
            ),
            provider,
        )
    except AIServiceError as e:
        logger.error(f"Provider test failed for {provider}: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "AI provider test failed", "details": e.message},
        )

    return ProviderTest(success=True, response=response.content, provider=response.provider)
