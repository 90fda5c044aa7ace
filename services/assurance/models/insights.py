"""
Insights Models
===============

Prioritisation views for the weekly assurance meeting.

Version: 0.1.0
"""

from datetime import datetime

from pydantic import BaseModel, Field


class DeliveryNeedingUpdate(BaseModel):
    """A project whose assessments have not been updated recently."""

    id: str
    name: str
    status: str
    last_service_standard_update: datetime | None = None
    days_since_standard_update: int | None = Field(
        default=None,
        description="Whole days since the last assessment change, None if never assessed",
    )


class StandardChange(BaseModel):
    """A standard whose assessed status has just worsened."""

    standard_number: int
    standard_name: str
    status_history: list[str] = Field(
        default_factory=list,
        description="Recent statuses, oldest to newest",
    )


class WorseningStandardsDelivery(BaseModel):
    id: str
    name: str
    status: str
    standard_changes: list[StandardChange] = Field(default_factory=list)


class PrioritisationResponse(BaseModel):
    deliveries_needing_standard_updates: list[DeliveryNeedingUpdate] = Field(default_factory=list)
    deliveries_with_worsening_standards: list[WorseningStandardsDelivery] = Field(default_factory=list)
