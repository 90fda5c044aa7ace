"""
Assessment Models
=================

One profession's verdict on one project against one service standard.

Version: 0.1.0
"""

from datetime import datetime

from pydantic import BaseModel, Field

from services.assurance.models.payload import PayloadModel
from services.assurance.models.status import AssessmentStatus


class AssessmentPayload(PayloadModel):
    """Body of an assessment upsert."""

    status: AssessmentStatus
    commentary: str = ""
    changed_by: str | None = Field(default=None, description="Actor label, defaults to the caller")
    update_date: str | None = Field(default=None, description="Backdated effective date")


class Assessment(BaseModel):
    """Current assessment keyed by (project_id, standard_id, profession_id)."""

    id: str
    project_id: str
    standard_id: str
    profession_id: str
    status: str
    commentary: str = ""
    last_updated: datetime | None = None
    changed_by: str = "Unknown"

    @property
    def key(self) -> dict[str, str]:
        return {
            "project_id": self.project_id,
            "standard_id": self.standard_id,
            "profession_id": self.profession_id,
        }
