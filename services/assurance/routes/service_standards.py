"""
Service Standard Routes
=======================

API endpoints for service standards. Mutations require the admin role.

Version: 0.1.0
"""

from fastapi import APIRouter, Depends, Query, status

from shared.auth import User, require_admin
from shared.models.common import MessageResponse
from services.assurance.dependencies import get_service_standard_service
from services.assurance.models.history import ServiceStandardHistory
from services.assurance.models.reference import ServiceStandard, ServiceStandardPayload
from services.assurance.services.reference import ServiceStandardService


router = APIRouter()


@router.get("", response_model=list[ServiceStandard])
async def list_service_standards(
    include_inactive: bool = Query(default=False, alias="includeInactive"),
    service: ServiceStandardService = Depends(get_service_standard_service),
) -> list[ServiceStandard]:
    return await service.list_items(include_inactive=include_inactive)


@router.post("/seed", response_model=MessageResponse)
async def seed_service_standards(
    payloads: list[ServiceStandardPayload],
    service: ServiceStandardService = Depends(get_service_standard_service),
    current_user: User = Depends(require_admin),
) -> MessageResponse:
    """
    Replace all service standards with the given list.
    """
    count = await service.seed(payloads)
    return MessageResponse(message=f"Seeded '{count}' service standards successfully", count=count)


@router.post("/deleteAll", response_model=MessageResponse)
async def delete_all_service_standards(
    service: ServiceStandardService = Depends(get_service_standard_service),
    current_user: User = Depends(require_admin),
) -> MessageResponse:
    count = await service.delete_all()
    return MessageResponse(message="All service standards deleted", count=count)


@router.get("/{standard_id}", response_model=ServiceStandard)
async def get_service_standard(
    standard_id: str,
    service: ServiceStandardService = Depends(get_service_standard_service),
) -> ServiceStandard:
    return await service.get(standard_id)


@router.get("/{standard_id}/history", response_model=list[ServiceStandardHistory])
async def get_service_standard_history(
    standard_id: str,
    include_archived: bool = Query(default=False),
    service: ServiceStandardService = Depends(get_service_standard_service),
) -> list[ServiceStandardHistory]:
    return await service.history(standard_id, include_archived=include_archived)


@router.post("", response_model=ServiceStandard, status_code=status.HTTP_201_CREATED)
async def create_service_standard(
    payload: ServiceStandardPayload,
    service: ServiceStandardService = Depends(get_service_standard_service),
    current_user: User = Depends(require_admin),
) -> ServiceStandard:
    return await service.create(payload, changed_by=current_user.actor)


@router.put("/{standard_id}", response_model=ServiceStandard)
async def update_service_standard(
    standard_id: str,
    payload: ServiceStandardPayload,
    service: ServiceStandardService = Depends(get_service_standard_service),
    current_user: User = Depends(require_admin),
) -> ServiceStandard:
    return await service.update(standard_id, payload, changed_by=current_user.actor)


@router.delete("/{standard_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_service_standard(
    standard_id: str,
    service: ServiceStandardService = Depends(get_service_standard_service),
    current_user: User = Depends(require_admin),
) -> None:
    """
    Soft delete: the standard is deactivated and keeps its history.
    """
    await service.soft_delete(standard_id, deleted_by=current_user.actor)


@router.post("/{standard_id}/restore", response_model=ServiceStandard)
async def restore_service_standard(
    standard_id: str,
    service: ServiceStandardService = Depends(get_service_standard_service),
    current_user: User = Depends(require_admin),
) -> ServiceStandard:
    return await service.restore(standard_id)
