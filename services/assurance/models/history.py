"""
History Models
==============

Append-only change records. An entry is never modified after it is
written except to flip `archived`.

Version: 0.1.0
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Change(BaseModel):
    """A single field transition, serialized as {"from": ..., "to": ...}."""

    model_config = ConfigDict(populate_by_name=True)

    from_: Any = Field(default=None, alias="from")
    to: Any = None


class HistoryEntry(BaseModel):
    """Timestamped, sparse set of field changes made by one actor."""

    id: str
    timestamp: datetime
    changed_by: str
    changes: dict[str, Change] = Field(default_factory=dict)
    archived: bool = False

    def to_value(self, field: str, default: Any = None) -> Any:
        """Value the entry moved `field` to, or `default` when it did not touch it."""
        change = self.changes.get(field)
        return change.to if change is not None else default


class ProjectHistory(HistoryEntry):
    project_id: str


class AssessmentHistory(HistoryEntry):
    project_id: str
    standard_id: str
    profession_id: str


class ProfessionHistory(HistoryEntry):
    profession_id: str


class ServiceStandardHistory(HistoryEntry):
    standard_id: str


class DeliveryGroupHistory(HistoryEntry):
    delivery_group_id: str


def latest_value(entries: Iterable[HistoryEntry], field: str, default: Any = None) -> Any:
    """
    Current value of `field` according to history.

    Args:
        entries: Active entries, newest first
        field: Change key to look for
        default: Returned when no entry carries the field

    Returns:
        The `to` value of the newest entry that changed `field`
    """
    for entry in entries:
        if field in entry.changes:
            return entry.changes[field].to
    return default
