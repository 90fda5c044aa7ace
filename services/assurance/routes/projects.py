"""
Project Routes
==============

API endpoints for projects and their change history.

Version: 0.1.0
"""

from fastapi import APIRouter, Depends, Query, status

from shared.auth import User, get_current_user
from shared.logging import get_logger
from services.assurance.dependencies import get_project_service
from services.assurance.models.history import ProjectHistory
from services.assurance.models.project import Project, ProjectPayload, TagCategorySummary
from services.assurance.services.projects import ProjectService


logger = get_logger(__name__)

router = APIRouter()


@router.get("", response_model=list[Project])
async def list_projects(
    tag: str | None = Query(default=None, description="Only projects carrying this tag"),
    start_date: str | None = Query(default=None, description="Earliest last_updated (ISO date)"),
    end_date: str | None = Query(default=None, description="Latest last_updated (ISO date)"),
    delivery_group_id: str | None = Query(default=None, description="Filter by delivery group"),
    service: ProjectService = Depends(get_project_service),
) -> list[Project]:
    """
    List projects ordered by name.
    """
    return await service.search(
        tag=tag,
        start_date=start_date,
        end_date=end_date,
        delivery_group_id=delivery_group_id,
    )


@router.get("/tags/summary", response_model=list[TagCategorySummary])
async def get_tags_summary(
    service: ProjectService = Depends(get_project_service),
) -> list[TagCategorySummary]:
    """
    Count projects per tag category and value.
    """
    return await service.tags_summary()


@router.get("/{project_id}", response_model=Project)
async def get_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
) -> Project:
    return await service.get(project_id)


@router.post("", response_model=Project, status_code=status.HTTP_201_CREATED)
async def create_project(
    payload: ProjectPayload,
    service: ProjectService = Depends(get_project_service),
    current_user: User = Depends(get_current_user),
) -> Project:
    """
    Create a project.

    Requires authentication. The initial status and commentary are
    recorded as the project's first history entry.
    """
    return await service.create(payload, changed_by=current_user.actor)


@router.put("/{project_id}", response_model=Project)
async def update_project(
    project_id: str,
    payload: ProjectPayload,
    suppress_history: bool = Query(
        default=False,
        alias="suppressHistory",
        description="Apply the update without recording history",
    ),
    service: ProjectService = Depends(get_project_service),
    current_user: User = Depends(get_current_user),
) -> Project:
    """
    Replace a project's fields, recording what changed.

    Requires authentication. `update_date` in the body may backdate the
    change; it is ignored when in the future or unparseable.
    """
    return await service.update(
        project_id,
        payload,
        changed_by=current_user.actor,
        suppress_history=suppress_history,
    )


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
    current_user: User = Depends(get_current_user),
) -> None:
    await service.delete(project_id)
    logger.info("project_delete_requested", project_id=project_id, user_id=current_user.id)


@router.get("/{project_id}/history", response_model=list[ProjectHistory])
async def get_project_history(
    project_id: str,
    include_archived: bool = Query(default=False, description="Include archived entries"),
    service: ProjectService = Depends(get_project_service),
) -> list[ProjectHistory]:
    """
    Project change history, newest first.
    """
    return await service.history(project_id, include_archived=include_archived)


@router.put("/{project_id}/history/{history_id}/archive", response_model=Project | None)
async def archive_project_history(
    project_id: str,
    history_id: str,
    service: ProjectService = Depends(get_project_service),
    current_user: User = Depends(get_current_user),
) -> Project | None:
    """
    Archive a history entry; status and commentary follow the newest remaining entry.

    Requires authentication.
    """
    return await service.archive_history(project_id, history_id, archived_by=current_user.actor)
