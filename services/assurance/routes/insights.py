"""
Insights Routes
===============

Version: 0.1.0
"""

from fastapi import APIRouter, Depends, Query

from services.assurance.dependencies import get_insights_service
from services.assurance.models.insights import PrioritisationResponse
from services.assurance.services.insights import (
    DEFAULT_STALE_DAYS,
    DEFAULT_WORSENING_DAYS,
    InsightsService,
)


router = APIRouter()


@router.get("/prioritisation", response_model=PrioritisationResponse)
async def get_prioritisation(
    stale_days: int = Query(
        default=DEFAULT_STALE_DAYS,
        alias="standardThreshold",
        ge=0,
        description="Days without an assessment change before a delivery needs an update",
    ),
    worsening_days: int = Query(
        default=DEFAULT_WORSENING_DAYS,
        alias="worseningDays",
        ge=0,
        description="Look-back window for worsening standards",
    ),
    service: InsightsService = Depends(get_insights_service),
) -> PrioritisationResponse:
    """
    Deliveries that need standard updates and deliveries whose standards are worsening.
    """
    return await service.prioritisation(stale_days=stale_days, worsening_days=worsening_days)
