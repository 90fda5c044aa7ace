"""
Assessment Routes
=================

API endpoints for per-profession standard assessments of a project.

Version: 0.1.0
"""

from fastapi import APIRouter, Depends, Query, Response, status

from shared.auth import User, get_current_user
from services.assurance.dependencies import get_assessment_service
from services.assurance.models.assessment import Assessment, AssessmentPayload
from services.assurance.models.history import AssessmentHistory
from services.assurance.services.assessments import AssessmentService


router = APIRouter()

ASSESSMENT_PATH = "/{project_id}/standards/{standard_id}/professions/{profession_id}"


@router.get("/{project_id}/assessments", response_model=list[Assessment])
async def list_project_assessments(
    project_id: str,
    service: AssessmentService = Depends(get_assessment_service),
) -> list[Assessment]:
    return await service.list_for_project(project_id)


@router.get(f"{ASSESSMENT_PATH}/assessment", response_model=Assessment)
async def get_assessment(
    project_id: str,
    standard_id: str,
    profession_id: str,
    service: AssessmentService = Depends(get_assessment_service),
) -> Assessment:
    return await service.get(project_id, standard_id, profession_id)


@router.post(f"{ASSESSMENT_PATH}/assessment", response_model=Assessment)
async def save_assessment(
    project_id: str,
    standard_id: str,
    profession_id: str,
    payload: AssessmentPayload,
    response: Response,
    service: AssessmentService = Depends(get_assessment_service),
    current_user: User = Depends(get_current_user),
) -> Assessment:
    """
    Create or overwrite a profession's assessment of a project against a standard.

    Requires authentication. Responds 201 when the assessment is new and
    200 when an existing one was updated or left unchanged.
    """
    assessment, created = await service.upsert(
        project_id,
        standard_id,
        profession_id,
        payload,
        changed_by=current_user.actor,
    )
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return assessment


@router.delete(f"{ASSESSMENT_PATH}/assessment", status_code=status.HTTP_204_NO_CONTENT)
async def delete_assessment(
    project_id: str,
    standard_id: str,
    profession_id: str,
    service: AssessmentService = Depends(get_assessment_service),
    current_user: User = Depends(get_current_user),
) -> None:
    await service.delete(project_id, standard_id, profession_id)


@router.get(f"{ASSESSMENT_PATH}/history", response_model=list[AssessmentHistory])
async def get_assessment_history(
    project_id: str,
    standard_id: str,
    profession_id: str,
    include_archived: bool = Query(default=False, description="Include archived entries"),
    service: AssessmentService = Depends(get_assessment_service),
) -> list[AssessmentHistory]:
    return await service.history(project_id, standard_id, profession_id, include_archived=include_archived)


@router.post(f"{ASSESSMENT_PATH}/history/{{history_id}}/archive", response_model=Assessment | None)
async def archive_assessment_history(
    project_id: str,
    standard_id: str,
    profession_id: str,
    history_id: str,
    service: AssessmentService = Depends(get_assessment_service),
    current_user: User = Depends(get_current_user),
) -> Assessment | None:
    """
    Archive an assessment history entry and recompute the current assessment.

    Returns the recomputed assessment, or null when no history remained
    and the assessment was removed.
    """
    return await service.archive_history(
        project_id,
        standard_id,
        profession_id,
        history_id,
        archived_by=current_user.actor,
    )
