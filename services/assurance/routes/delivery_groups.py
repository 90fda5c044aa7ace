"""
Delivery Group Routes
=====================

API endpoints for delivery groups and their change history.

Version: 0.1.0
"""

from fastapi import APIRouter, Depends, Query, status

from shared.auth import User, require_admin
from services.assurance.dependencies import get_delivery_group_service
from services.assurance.models.delivery import DeliveryGroup, DeliveryGroupPayload
from services.assurance.models.history import DeliveryGroupHistory
from services.assurance.models.project import Project
from services.assurance.services.delivery import DeliveryGroupService


router = APIRouter()


@router.get("", response_model=list[DeliveryGroup])
async def list_delivery_groups(
    service: DeliveryGroupService = Depends(get_delivery_group_service),
) -> list[DeliveryGroup]:
    return await service.list_groups()


@router.get("/{group_id}", response_model=DeliveryGroup)
async def get_delivery_group(
    group_id: str,
    service: DeliveryGroupService = Depends(get_delivery_group_service),
) -> DeliveryGroup:
    return await service.get(group_id)


@router.get("/{group_id}/projects", response_model=list[Project])
async def list_delivery_group_projects(
    group_id: str,
    service: DeliveryGroupService = Depends(get_delivery_group_service),
) -> list[Project]:
    return await service.projects_for(group_id)


@router.post("", response_model=DeliveryGroup, status_code=status.HTTP_201_CREATED)
async def create_delivery_group(
    payload: DeliveryGroupPayload,
    service: DeliveryGroupService = Depends(get_delivery_group_service),
    current_user: User = Depends(require_admin),
) -> DeliveryGroup:
    return await service.create(payload, changed_by=current_user.actor)


@router.put("/{group_id}", response_model=DeliveryGroup)
async def update_delivery_group(
    group_id: str,
    payload: DeliveryGroupPayload,
    service: DeliveryGroupService = Depends(get_delivery_group_service),
    current_user: User = Depends(require_admin),
) -> DeliveryGroup:
    return await service.update(group_id, payload, changed_by=current_user.actor)


@router.delete("/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_delivery_group(
    group_id: str,
    service: DeliveryGroupService = Depends(get_delivery_group_service),
    current_user: User = Depends(require_admin),
) -> None:
    await service.delete(group_id)


@router.get("/{group_id}/history", response_model=list[DeliveryGroupHistory])
async def get_delivery_group_history(
    group_id: str,
    include_archived: bool = Query(default=False),
    service: DeliveryGroupService = Depends(get_delivery_group_service),
) -> list[DeliveryGroupHistory]:
    return await service.history(group_id, include_archived=include_archived)


@router.put("/{group_id}/history/{history_id}/archive", status_code=status.HTTP_200_OK)
async def archive_delivery_group_history(
    group_id: str,
    history_id: str,
    service: DeliveryGroupService = Depends(get_delivery_group_service),
    current_user: User = Depends(require_admin),
) -> dict[str, str]:
    await service.archive_history(group_id, history_id, archived_by=current_user.actor)
    return {"archived": history_id}
