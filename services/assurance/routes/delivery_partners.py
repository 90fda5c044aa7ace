"""
Delivery Partner Routes
=======================

Version: 0.1.0
"""

from fastapi import APIRouter, Depends, status

from shared.auth import User, require_admin
from services.assurance.dependencies import get_delivery_partner_service
from services.assurance.models.delivery import DeliveryPartner, DeliveryPartnerPayload
from services.assurance.services.delivery import DeliveryPartnerService


router = APIRouter()


@router.get("", response_model=list[DeliveryPartner])
async def list_delivery_partners(
    service: DeliveryPartnerService = Depends(get_delivery_partner_service),
) -> list[DeliveryPartner]:
    return await service.list_partners()


@router.get("/{partner_id}", response_model=DeliveryPartner)
async def get_delivery_partner(
    partner_id: str,
    service: DeliveryPartnerService = Depends(get_delivery_partner_service),
) -> DeliveryPartner:
    return await service.get(partner_id)


@router.post("", response_model=DeliveryPartner, status_code=status.HTTP_201_CREATED)
async def create_delivery_partner(
    payload: DeliveryPartnerPayload,
    service: DeliveryPartnerService = Depends(get_delivery_partner_service),
    current_user: User = Depends(require_admin),
) -> DeliveryPartner:
    return await service.create(payload)


@router.put("/{partner_id}", response_model=DeliveryPartner)
async def update_delivery_partner(
    partner_id: str,
    payload: DeliveryPartnerPayload,
    service: DeliveryPartnerService = Depends(get_delivery_partner_service),
    current_user: User = Depends(require_admin),
) -> DeliveryPartner:
    return await service.update(partner_id, payload)


@router.delete("/{partner_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_delivery_partner(
    partner_id: str,
    service: DeliveryPartnerService = Depends(get_delivery_partner_service),
    current_user: User = Depends(require_admin),
) -> None:
    await service.delete(partner_id)
