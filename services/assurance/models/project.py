"""
Project Models
==============

Delivery projects and their cached standards summary.

Version: 0.1.0
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from services.assurance.models.payload import PayloadModel, RequiredText
from services.assurance.models.status import RagStatus


# Empty while the phase is not yet known
ProjectPhase = Literal["", "Discovery", "Alpha", "Private Beta", "Public Beta", "Live"]


class ProfessionAssessmentSummary(BaseModel):
    """One profession's contribution to a standard's rollup."""

    profession_id: str
    status: str
    commentary: str = ""
    last_updated: datetime | None = None


class StandardSummary(BaseModel):
    """Per-standard rollup of all profession assessments on a project."""

    standard_id: str
    aggregated_status: str
    aggregated_commentary: str = ""
    last_updated: datetime | None = None
    professions: list[ProfessionAssessmentSummary] = Field(default_factory=list)


class ProjectPayload(PayloadModel):
    """Client-supplied project fields for create and full-replacement update."""

    id: RequiredText | None = Field(default=None, description="Optional id, generated when omitted")
    name: RequiredText = Field(..., max_length=500)
    status: RagStatus
    commentary: str = ""
    phase: ProjectPhase = ""
    def_code: str = ""
    tags: list[RequiredText] = Field(default_factory=list, description='"Category: Value" labels')
    delivery_group_id: str | None = None
    update_date: str | None = Field(
        default=None,
        description="Effective 'as of' date of the change (ISO date or datetime)",
    )


class Project(BaseModel):
    """Stored project."""

    id: str
    name: str
    status: str
    commentary: str = ""
    phase: str = ""
    def_code: str = ""
    tags: list[str] = Field(default_factory=list)
    delivery_group_id: str | None = None
    update_date: str | None = None
    last_updated: datetime | None = None
    standards_summary: list[StandardSummary] = Field(default_factory=list)


class TagValueCount(BaseModel):
    value: str
    count: int


class TagCategorySummary(BaseModel):
    """Projects counted per tag category and value ("Category: Value")."""

    category: str
    total: int
    values: list[TagValueCount] = Field(default_factory=list)
