"""
Theme Models
============

Cross-cutting themes that group projects.

Version: 0.1.0
"""

from datetime import datetime

from pydantic import BaseModel, Field

from services.assurance.models.payload import PayloadModel, RequiredText


class ThemePayload(PayloadModel):
    name: RequiredText = Field(..., max_length=200)
    description: str = Field(default="", max_length=2000)
    project_ids: list[str] = Field(default_factory=list)


class Theme(BaseModel):
    id: str
    name: str
    description: str = ""
    project_ids: list[str] = Field(default_factory=list)
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
    created_by: str | None = None
    updated_by: str | None = None
