"""
Assurance Models
================

Pydantic models for projects, assessments, history, reference data
and insights.

Version: 0.1.0
"""

from services.assurance.models.assessment import Assessment, AssessmentPayload
from services.assurance.models.delivery import (
    DeliveryGroup,
    DeliveryGroupPayload,
    DeliveryPartner,
    DeliveryPartnerPayload,
    ProjectDeliveryPartner,
    ProjectDeliveryPartnerPayload,
)
from services.assurance.models.history import (
    AssessmentHistory,
    Change,
    DeliveryGroupHistory,
    HistoryEntry,
    ProfessionHistory,
    ProjectHistory,
    ServiceStandardHistory,
    latest_value,
)
from services.assurance.models.insights import (
    DeliveryNeedingUpdate,
    PrioritisationResponse,
    StandardChange,
    WorseningStandardsDelivery,
)
from services.assurance.models.payload import PayloadModel, RequiredText
from services.assurance.models.project import (
    ProfessionAssessmentSummary,
    Project,
    ProjectPayload,
    ProjectPhase,
    StandardSummary,
    TagCategorySummary,
    TagValueCount,
)
from services.assurance.models.reference import (
    Profession,
    ProfessionPayload,
    ServiceStandard,
    ServiceStandardPayload,
)
from services.assurance.models.status import NOT_UPDATED, AssessmentStatus, RagStatus
from services.assurance.models.theme import Theme, ThemePayload


__all__ = [
    # Status
    "RagStatus",
    "AssessmentStatus",
    "NOT_UPDATED",
    # Payloads
    "PayloadModel",
    "RequiredText",
    # History
    "Change",
    "HistoryEntry",
    "ProjectHistory",
    "AssessmentHistory",
    "ProfessionHistory",
    "ServiceStandardHistory",
    "DeliveryGroupHistory",
    "latest_value",
    # Project
    "ProjectPhase",
    "Project",
    "ProjectPayload",
    "StandardSummary",
    "ProfessionAssessmentSummary",
    "TagCategorySummary",
    "TagValueCount",
    # Assessment
    "Assessment",
    "AssessmentPayload",
    # Reference data
    "Profession",
    "ProfessionPayload",
    "ServiceStandard",
    "ServiceStandardPayload",
    # Delivery
    "DeliveryGroup",
    "DeliveryGroupPayload",
    "DeliveryPartner",
    "DeliveryPartnerPayload",
    "ProjectDeliveryPartner",
    "ProjectDeliveryPartnerPayload",
    # Insights
    "DeliveryNeedingUpdate",
    "StandardChange",
    "WorseningStandardsDelivery",
    "PrioritisationResponse",
    # Themes
    "Theme",
    "ThemePayload",
]
