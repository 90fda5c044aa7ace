"""
Reference Data Models
=====================

Professions and service standards. Both are soft-deleted: inactive
records keep their history and stay addressable by id.

Version: 0.1.0
"""

from datetime import datetime

from pydantic import BaseModel, Field

from services.assurance.models.payload import PayloadModel, RequiredText


class ProfessionPayload(PayloadModel):
    id: str = Field(..., pattern=r"^[a-z0-9-]+$", description="Lowercase slug, e.g. user-research")
    name: RequiredText = Field(..., max_length=100, pattern=r"^[A-Za-z0-9\s-]+$")
    description: RequiredText = Field(..., max_length=500)


class Profession(BaseModel):
    """A discipline that assesses projects against standards."""

    id: str
    name: str
    description: str = ""
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None
    deleted_by: str | None = None


class ServiceStandardPayload(PayloadModel):
    id: RequiredText
    number: int = Field(..., ge=1, le=14)
    name: RequiredText = Field(..., max_length=200)
    description: RequiredText = Field(..., max_length=1000)
    guidance: str = Field(default="", max_length=3000)


class ServiceStandard(BaseModel):
    """A named assurance criterion projects are assessed against."""

    id: str
    number: int
    name: str
    description: str = ""
    guidance: str = ""
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None
    deleted_by: str | None = None
