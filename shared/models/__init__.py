"""
Shared Models
=============

Pydantic models shared across services.
"""

from shared.models.common import (
    ErrorResponse,
    HealthResponse,
    MessageResponse,
)

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "MessageResponse",
]
