"""
RAG Status Models
=================

Traffic-light statuses used by projects and profession assessments.

Version: 0.1.0
"""

from enum import Enum
from typing import Literal


class RagStatus(str, Enum):
    """Red/Amber/Green health indicator, including the intermediate states."""

    RED = "RED"
    AMBER_RED = "AMBER_RED"
    AMBER = "AMBER"
    GREEN_AMBER = "GREEN_AMBER"
    GREEN = "GREEN"
    TBC = "TBC"


# Profession assessments use the collapsed scale
AssessmentStatus = Literal["RED", "AMBER", "GREEN", "TBC"]

NOT_UPDATED = "NOT_UPDATED"
