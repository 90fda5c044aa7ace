"""
Project Delivery Partner Routes
===============================

Engagements of delivery partners on a project.

Version: 0.1.0
"""

from fastapi import APIRouter, Depends, status

from shared.auth import User, require_admin
from services.assurance.dependencies import get_project_delivery_partner_service
from services.assurance.models.delivery import ProjectDeliveryPartner, ProjectDeliveryPartnerPayload
from services.assurance.services.delivery import ProjectDeliveryPartnerService


router = APIRouter()


@router.get("/{project_id}/deliverypartners", response_model=list[ProjectDeliveryPartner])
async def list_project_delivery_partners(
    project_id: str,
    service: ProjectDeliveryPartnerService = Depends(get_project_delivery_partner_service),
) -> list[ProjectDeliveryPartner]:
    """
    List the partners engaged on a project, earliest engagement first.
    """
    return await service.list_for_project(project_id)


@router.get("/{project_id}/deliverypartners/{partner_id}", response_model=ProjectDeliveryPartner)
async def get_project_delivery_partner(
    project_id: str,
    partner_id: str,
    service: ProjectDeliveryPartnerService = Depends(get_project_delivery_partner_service),
) -> ProjectDeliveryPartner:
    return await service.get(project_id, partner_id)


@router.post(
    "/{project_id}/deliverypartners",
    response_model=ProjectDeliveryPartner,
    status_code=status.HTTP_201_CREATED,
)
async def create_project_delivery_partner(
    project_id: str,
    payload: ProjectDeliveryPartnerPayload,
    service: ProjectDeliveryPartnerService = Depends(get_project_delivery_partner_service),
    current_user: User = Depends(require_admin),
) -> ProjectDeliveryPartner:
    return await service.create(project_id, payload)


@router.put("/{project_id}/deliverypartners/{partner_id}", response_model=ProjectDeliveryPartner)
async def update_project_delivery_partner(
    project_id: str,
    partner_id: str,
    payload: ProjectDeliveryPartnerPayload,
    service: ProjectDeliveryPartnerService = Depends(get_project_delivery_partner_service),
    current_user: User = Depends(require_admin),
) -> ProjectDeliveryPartner:
    return await service.update(project_id, partner_id, payload)


@router.delete("/{project_id}/deliverypartners/{partner_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project_delivery_partner(
    project_id: str,
    partner_id: str,
    service: ProjectDeliveryPartnerService = Depends(get_project_delivery_partner_service),
    current_user: User = Depends(require_admin),
) -> None:
    await service.delete(project_id, partner_id)
