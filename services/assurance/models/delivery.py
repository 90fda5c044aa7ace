"""
Delivery Models
===============

Delivery groups (history-tracked), delivery partners and their
engagements on projects.

Version: 0.1.0
"""

from datetime import datetime

from pydantic import BaseModel, Field

from services.assurance.models.payload import PayloadModel, RequiredText


class DeliveryGroupPayload(PayloadModel):
    name: RequiredText
    status: RequiredText
    lead: str = ""
    outcome: str = ""
    roadmap_name: str = ""
    roadmap_link: str = ""
    is_active: bool = True


class DeliveryGroup(BaseModel):
    id: str
    name: str
    status: str
    lead: str = ""
    outcome: str = ""
    roadmap_name: str = ""
    roadmap_link: str = ""
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DeliveryPartnerPayload(PayloadModel):
    name: RequiredText
    is_active: bool = True


class DeliveryPartner(BaseModel):
    id: str
    name: str
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProjectDeliveryPartnerPayload(PayloadModel):
    """Engagement of a delivery partner on a project."""

    project_id: RequiredText
    delivery_partner_id: RequiredText
    engagement_manager: str = ""
    engagement_started: datetime | None = Field(default=None, description="Defaults to now")
    engagement_ended: datetime | None = None


class ProjectDeliveryPartner(BaseModel):
    """Stored link, unique per (project_id, delivery_partner_id)."""

    id: str
    project_id: str
    delivery_partner_id: str
    engagement_manager: str = ""
    engagement_started: datetime
    engagement_ended: datetime | None = None

    @property
    def key(self) -> dict[str, str]:
        return {"project_id": self.project_id, "delivery_partner_id": self.delivery_partner_id}
