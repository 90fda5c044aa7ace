"""
Theme Routes
============

Version: 0.1.0
"""

from fastapi import APIRouter, Depends, Query, status

from shared.auth import User, require_admin
from services.assurance.dependencies import get_theme_service
from services.assurance.models.theme import Theme, ThemePayload
from services.assurance.services.themes import ThemeService


router = APIRouter()


@router.get("", response_model=list[Theme])
async def list_themes(
    include_archived: bool = Query(default=False, alias="includeArchived"),
    service: ThemeService = Depends(get_theme_service),
) -> list[Theme]:
    return await service.list_themes(include_archived=include_archived)


@router.get("/by-project/{project_id}", response_model=list[Theme])
async def list_project_themes(
    project_id: str,
    service: ThemeService = Depends(get_theme_service),
) -> list[Theme]:
    return await service.by_project(project_id)


@router.get("/{theme_id}", response_model=Theme)
async def get_theme(
    theme_id: str,
    service: ThemeService = Depends(get_theme_service),
) -> Theme:
    return await service.get(theme_id)


@router.post("", response_model=Theme, status_code=status.HTTP_201_CREATED)
async def create_theme(
    payload: ThemePayload,
    service: ThemeService = Depends(get_theme_service),
    current_user: User = Depends(require_admin),
) -> Theme:
    return await service.create(payload, created_by=current_user.actor)


@router.put("/{theme_id}", response_model=Theme)
async def update_theme(
    theme_id: str,
    payload: ThemePayload,
    service: ThemeService = Depends(get_theme_service),
    current_user: User = Depends(require_admin),
) -> Theme:
    return await service.update(theme_id, payload, updated_by=current_user.actor)


@router.delete("/{theme_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_theme(
    theme_id: str,
    service: ThemeService = Depends(get_theme_service),
    current_user: User = Depends(require_admin),
) -> None:
    await service.delete(theme_id)


@router.put("/{theme_id}/archive", status_code=status.HTTP_204_NO_CONTENT)
async def archive_theme(
    theme_id: str,
    service: ThemeService = Depends(get_theme_service),
    current_user: User = Depends(require_admin),
) -> None:
    await service.archive(theme_id, archived_by=current_user.actor)


@router.put("/{theme_id}/restore", status_code=status.HTTP_204_NO_CONTENT)
async def restore_theme(
    theme_id: str,
    service: ThemeService = Depends(get_theme_service),
    current_user: User = Depends(require_admin),
) -> None:
    await service.restore(theme_id, restored_by=current_user.actor)
