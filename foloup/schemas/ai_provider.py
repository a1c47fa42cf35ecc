"""AI provider preference schemas."""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel

from foloup.services.ai_service import AIProvider


class ProviderPreference(BaseModel):
    id: int
    organization_id: str
    user_id: int
    preferred_provider: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProviderSelection(BaseModel):
    provider: str


class ProviderStatus(BaseModel):
    provider: AIProvider
    preference: Optional[ProviderPreference] = None


class ProviderUpdated(BaseModel):
    success: bool
    provider: AIProvider
    preference: ProviderPreference


class ProviderTest(BaseModel):
    success: bool
    response: str
    provider: AIProvider
