"""
Change Detector
===============

Field-by-field diff between the stored and incoming state of an entity.

The result is sparse: a field appears only when its value differs.
When a status-bearing entity changes in any other field but keeps its
status, a no-op status transition is added anyway so every history
entry carries the status that was current at that moment.

Version: 0.1.0
"""

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel

from services.assurance.models.history import Change


PROJECT_FIELDS = ("name", "phase", "status", "commentary", "tags", "def_code", "delivery_group_id")
ASSESSMENT_FIELDS = ("status", "commentary")
PROFESSION_FIELDS = ("name", "description")
SERVICE_STANDARD_FIELDS = ("name", "description", "guidance")
DELIVERY_GROUP_FIELDS = ("name", "status", "lead", "outcome", "roadmap_name", "roadmap_link", "is_active")


def _field_value(snapshot: BaseModel | Mapping[str, Any] | None, field: str) -> Any:
    if snapshot is None:
        return None
    if isinstance(snapshot, Mapping):
        return snapshot.get(field)
    return getattr(snapshot, field, None)


def detect_changes(
    existing: BaseModel | Mapping[str, Any] | None,
    incoming: BaseModel | Mapping[str, Any],
    fields: Sequence[str],
    status_field: str | None = "status",
    empty: Any = "",
) -> dict[str, Change]:
    """
    Compare two snapshots of the same entity.

    Args:
        existing: Stored snapshot, or None for a brand new entity
        incoming: Snapshot about to be persisted
        fields: Fields to compare
        status_field: Field that receives the no-op transition; None disables it
        empty: "From" value used for fields of a brand new entity

    Returns:
        Mapping of changed field name to its transition (empty when nothing differs)
    """
    changes: dict[str, Change] = {}

    for field in fields:
        old = _field_value(existing, field) if existing is not None else empty
        new = _field_value(incoming, field)
        if isinstance(old, list | tuple) and isinstance(new, list | tuple):
            differs = list(old) != list(new)
        else:
            differs = old != new
        if differs:
            changes[field] = Change(from_=old, to=new)

    # Keep status on every entry so "latest status" can be read off history alone
    if (
        changes
        and status_field is not None
        and status_field in fields
        and status_field not in changes
    ):
        current = _field_value(existing, status_field)
        changes[status_field] = Change(from_=current, to=current)

    return changes
