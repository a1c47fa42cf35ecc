"""Main API v1 router."""

from fastapi import APIRouter

from foloup.api.v1.endpoints import (
    ai_provider,
    analytics,
    ats,
    auth,
    candidate_links,
    candidates,
    interviews,
    public,
    responses,
    resumes,
)

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(ai_provider.router, prefix="/ai-provider", tags=["ai-provider"])
api_router.include_router(ats.router, prefix="/ats", tags=["ats"])
api_router.include_router(interviews.router, prefix="/interviews", tags=["interviews"])
api_router.include_router(candidates.router, prefix="/candidates", tags=["candidates"])
api_router.include_router(resumes.router, prefix="/resumes", tags=["resumes"])
api_router.include_router(
    candidate_links.router, prefix="/candidate-links", tags=["candidate-links"])
api_router.include_router(responses.router, prefix="/responses", tags=["responses"])
api_router.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
api_router.include_router(public.router, prefix="/public", tags=["public"])
