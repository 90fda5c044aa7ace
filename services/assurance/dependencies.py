"""
Service Dependencies
====================

FastAPI dependencies that assemble services from the request's
database handle. Tests replace `get_mongodb` through
`app.dependency_overrides`.

Version: 0.1.0
"""

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from shared.database.mongodb import get_mongodb
from services.assurance.repositories import (
    AssessmentHistoryLedger,
    AssessmentRepository,
    DeliveryGroupHistoryLedger,
    DeliveryGroupRepository,
    DeliveryPartnerRepository,
    ProfessionHistoryLedger,
    ProfessionRepository,
    ProjectDeliveryPartnerRepository,
    ProjectHistoryLedger,
    ProjectRepository,
    ServiceStandardHistoryLedger,
    ServiceStandardRepository,
    ThemeRepository,
)
from services.assurance.services import (
    AssessmentService,
    DeliveryGroupService,
    DeliveryPartnerService,
    InsightsService,
    ProfessionService,
    ProjectDeliveryPartnerService,
    ProjectService,
    ServiceStandardService,
    StandardsSummaryAggregator,
    ThemeService,
)


def get_project_service(db: AsyncIOMotorDatabase = Depends(get_mongodb)) -> ProjectService:  # type: ignore[type-arg]
    return ProjectService(ProjectRepository(db), ProjectHistoryLedger(db))


def get_assessment_service(db: AsyncIOMotorDatabase = Depends(get_mongodb)) -> AssessmentService:  # type: ignore[type-arg]
    projects = ProjectRepository(db)
    assessments = AssessmentRepository(db)
    return AssessmentService(
        assessments=assessments,
        history=AssessmentHistoryLedger(db),
        projects=projects,
        standards=ServiceStandardRepository(db),
        professions=ProfessionRepository(db),
        aggregator=StandardsSummaryAggregator(projects, assessments),
    )


def get_profession_service(db: AsyncIOMotorDatabase = Depends(get_mongodb)) -> ProfessionService:  # type: ignore[type-arg]
    return ProfessionService(ProfessionRepository(db), ProfessionHistoryLedger(db))


def get_service_standard_service(
    db: AsyncIOMotorDatabase = Depends(get_mongodb),  # type: ignore[type-arg]
) -> ServiceStandardService:
    return ServiceStandardService(ServiceStandardRepository(db), ServiceStandardHistoryLedger(db))


def get_delivery_group_service(
    db: AsyncIOMotorDatabase = Depends(get_mongodb),  # type: ignore[type-arg]
) -> DeliveryGroupService:
    return DeliveryGroupService(DeliveryGroupRepository(db), DeliveryGroupHistoryLedger(db), ProjectRepository(db))


def get_delivery_partner_service(
    db: AsyncIOMotorDatabase = Depends(get_mongodb),  # type: ignore[type-arg]
) -> DeliveryPartnerService:
    return DeliveryPartnerService(DeliveryPartnerRepository(db))


def get_theme_service(db: AsyncIOMotorDatabase = Depends(get_mongodb)) -> ThemeService:  # type: ignore[type-arg]
    return ThemeService(ThemeRepository(db))


def get_project_delivery_partner_service(
    db: AsyncIOMotorDatabase = Depends(get_mongodb),  # type: ignore[type-arg]
) -> ProjectDeliveryPartnerService:
    return ProjectDeliveryPartnerService(
        ProjectDeliveryPartnerRepository(db),
        ProjectRepository(db),
        DeliveryPartnerRepository(db),
    )


def get_insights_service(db: AsyncIOMotorDatabase = Depends(get_mongodb)) -> InsightsService:  # type: ignore[type-arg]
    return InsightsService(ProjectRepository(db), AssessmentHistoryLedger(db), ServiceStandardRepository(db))
