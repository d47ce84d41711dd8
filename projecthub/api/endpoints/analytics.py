from fastapi import APIRouter, Depends

from projecthub.api.deps import get_analytics_service
from projecthub.api.helpers.authentication import get_current_user
from projecthub.models.pydantic_models import StatsModel
from projecthub.services import AnalyticsService
from projecthub.services.auth import TokenIdentity

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.get("/stats", response_model=StatsModel)
async def get_stats(
    current_user: TokenIdentity = Depends(get_current_user),
    analytics: AnalyticsService = Depends(get_analytics_service),
):
    """Global user/project counts plus the caller's projects by status and technology."""
    return await analytics.stats(current_user.user_id)
