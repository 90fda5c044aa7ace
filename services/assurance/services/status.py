"""
Status Reducer
==============

Collapses many per-profession RAG statuses into one aggregated status.

AMBER_RED and GREEN_AMBER fold into AMBER, then the most severe status
wins under RED < AMBER < GREEN < TBC. The result depends only on which
statuses are present, never on their order.

Version: 0.1.0
"""

from collections.abc import Iterable

from shared.logging import get_logger
from services.assurance.models.status import NOT_UPDATED, RagStatus


logger = get_logger(__name__)

_COLLAPSE = {
    RagStatus.AMBER_RED.value: RagStatus.AMBER.value,
    RagStatus.GREEN_AMBER.value: RagStatus.AMBER.value,
}

SEVERITY_ORDER = (
    RagStatus.RED.value,
    RagStatus.AMBER.value,
    RagStatus.GREEN.value,
    RagStatus.TBC.value,
)

_SEVERITY = {status: rank for rank, status in enumerate(SEVERITY_ORDER)}


def collapse_status(status: str) -> str:
    """Map a five-state status onto the three-state (+TBC) scale."""
    return _COLLAPSE.get(status, status)


def aggregate_status(statuses: Iterable[str]) -> str:
    """
    Reduce statuses to the most severe one.

    Args:
        statuses: Five-state or three-state status strings

    Returns:
        RED, AMBER, GREEN or TBC; NOT_UPDATED when nothing recognisable was given
    """
    ranked: set[str] = set()
    for status in statuses:
        collapsed = collapse_status(status)
        if collapsed not in _SEVERITY:
            logger.warning("unrecognised_status_ignored", status=status)
            continue
        ranked.add(collapsed)

    if not ranked:
        return NOT_UPDATED

    return min(ranked, key=_SEVERITY.__getitem__)
