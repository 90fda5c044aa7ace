"""
Payload Validators
==================

Injected validators that report every failure in a payload at once.

The rules themselves are declared on the payload models; a validator
re-runs pydantic validation over the payload and flattens the failures
into "field: message" strings. `validate()` returns an empty list for a
valid payload.

Version: 0.1.0
"""

from collections.abc import Iterable, Mapping
from typing import Any, ClassVar, Protocol

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from services.assurance.models.assessment import AssessmentPayload
from services.assurance.models.delivery import (
    DeliveryGroupPayload,
    DeliveryPartnerPayload,
    ProjectDeliveryPartnerPayload,
)
from services.assurance.models.project import ProjectPayload
from services.assurance.models.reference import ProfessionPayload, ServiceStandardPayload
from services.assurance.models.theme import ThemePayload


class Validator(Protocol):
    def validate(self, payload: object) -> list[str]: ...


def format_errors(errors: Iterable[Mapping[str, Any]]) -> list[str]:
    """Render pydantic error details as "loc.path: message"."""
    return [
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', 'invalid')}"
        for error in errors
    ]


class ModelValidator:
    """Validates a payload, or a plain mapping, against `model`."""

    model: ClassVar[type[BaseModel]]

    def validate(self, payload: BaseModel | Mapping[str, Any]) -> list[str]:
        try:
            self.model.model_validate(payload)
        except PydanticValidationError as e:
            return format_errors(e.errors())
        return []


class ProjectValidator(ModelValidator):
    model = ProjectPayload


class AssessmentValidator(ModelValidator):
    model = AssessmentPayload


class ProfessionValidator(ModelValidator):
    model = ProfessionPayload


class ServiceStandardValidator(ModelValidator):
    model = ServiceStandardPayload


class DeliveryGroupValidator(ModelValidator):
    model = DeliveryGroupPayload


class DeliveryPartnerValidator(ModelValidator):
    model = DeliveryPartnerPayload


class ProjectDeliveryPartnerValidator(ModelValidator):
    model = ProjectDeliveryPartnerPayload


class ThemeValidator(ModelValidator):
    model = ThemePayload
