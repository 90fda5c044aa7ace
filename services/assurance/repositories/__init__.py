"""
Assurance Repositories
======================

Motor-backed persistence collaborators.

Version: 0.1.0
"""

from services.assurance.repositories.assessments import AssessmentRepository, assessment_key
from services.assurance.repositories.base import MongoRepository, SoftDeleteRepository, new_id
from services.assurance.repositories.delivery import (
    DeliveryGroupRepository,
    DeliveryPartnerRepository,
    ProjectDeliveryPartnerRepository,
)
from services.assurance.repositories.history import (
    AssessmentHistoryLedger,
    DeliveryGroupHistoryLedger,
    HistoryLedger,
    ProfessionHistoryLedger,
    ProjectHistoryLedger,
    ServiceStandardHistoryLedger,
)
from services.assurance.repositories.projects import ProjectRepository
from services.assurance.repositories.reference import ProfessionRepository, ServiceStandardRepository
from services.assurance.repositories.themes import ThemeRepository


__all__ = [
    "MongoRepository",
    "SoftDeleteRepository",
    "new_id",
    # History
    "HistoryLedger",
    "ProjectHistoryLedger",
    "AssessmentHistoryLedger",
    "ProfessionHistoryLedger",
    "ServiceStandardHistoryLedger",
    "DeliveryGroupHistoryLedger",
    # Entities
    "ProjectRepository",
    "AssessmentRepository",
    "assessment_key",
    "ProfessionRepository",
    "ServiceStandardRepository",
    "DeliveryGroupRepository",
    "DeliveryPartnerRepository",
    "ProjectDeliveryPartnerRepository",
    "ThemeRepository",
]
