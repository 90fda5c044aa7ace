"""
Profession Routes
=================

API endpoints for professions. Mutations require the admin role.

Version: 0.1.0
"""

from fastapi import APIRouter, Depends, Query, status

from shared.auth import User, require_admin
from shared.models.common import MessageResponse
from services.assurance.dependencies import get_profession_service
from services.assurance.models.history import ProfessionHistory
from services.assurance.models.reference import Profession, ProfessionPayload
from services.assurance.services.reference import ProfessionService


router = APIRouter()


@router.get("", response_model=list[Profession])
async def list_professions(
    include_inactive: bool = Query(default=False, alias="includeInactive"),
    service: ProfessionService = Depends(get_profession_service),
) -> list[Profession]:
    return await service.list_items(include_inactive=include_inactive)


@router.post("/seed", response_model=MessageResponse)
async def seed_professions(
    payloads: list[ProfessionPayload],
    service: ProfessionService = Depends(get_profession_service),
    current_user: User = Depends(require_admin),
) -> MessageResponse:
    """
    Replace all professions with the given list.
    """
    count = await service.seed(payloads)
    return MessageResponse(message=f"Seeded '{count}' professions successfully", count=count)


@router.post("/deleteAll", response_model=MessageResponse)
async def delete_all_professions(
    service: ProfessionService = Depends(get_profession_service),
    current_user: User = Depends(require_admin),
) -> MessageResponse:
    count = await service.delete_all()
    return MessageResponse(message="All professions deleted", count=count)


@router.get("/{profession_id}", response_model=Profession)
async def get_profession(
    profession_id: str,
    service: ProfessionService = Depends(get_profession_service),
) -> Profession:
    return await service.get(profession_id)


@router.get("/{profession_id}/history", response_model=list[ProfessionHistory])
async def get_profession_history(
    profession_id: str,
    include_archived: bool = Query(default=False),
    service: ProfessionService = Depends(get_profession_service),
) -> list[ProfessionHistory]:
    return await service.history(profession_id, include_archived=include_archived)


@router.post("", response_model=Profession, status_code=status.HTTP_201_CREATED)
async def create_profession(
    payload: ProfessionPayload,
    service: ProfessionService = Depends(get_profession_service),
    current_user: User = Depends(require_admin),
) -> Profession:
    return await service.create(payload, changed_by=current_user.actor)


@router.put("/{profession_id}", response_model=Profession)
async def update_profession(
    profession_id: str,
    payload: ProfessionPayload,
    service: ProfessionService = Depends(get_profession_service),
    current_user: User = Depends(require_admin),
) -> Profession:
    return await service.update(profession_id, payload, changed_by=current_user.actor)


@router.delete("/{profession_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_profession(
    profession_id: str,
    service: ProfessionService = Depends(get_profession_service),
    current_user: User = Depends(require_admin),
) -> None:
    """
    Soft delete: the profession is deactivated and keeps its history.
    """
    await service.soft_delete(profession_id, deleted_by=current_user.actor)


@router.post("/{profession_id}/restore", response_model=Profession)
async def restore_profession(
    profession_id: str,
    service: ProfessionService = Depends(get_profession_service),
    current_user: User = Depends(require_admin),
) -> Profession:
    return await service.restore(profession_id)
