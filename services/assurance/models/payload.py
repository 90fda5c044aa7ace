"""
Payload Base
============

Shared base class and field types for client-supplied bodies.

Version: 0.1.0
"""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, StringConstraints


# Non-blank text; surrounding whitespace is stripped
RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class PayloadModel(BaseModel):
    """
    Base for request payloads.

    Payload instances are revalidated whenever they pass through
    validation again, so a payload assembled without validation
    (`model_construct`, `model_copy(update=...)`) is still checked by the
    service validators before any write.
    """

    model_config = ConfigDict(use_enum_values=True, revalidate_instances="always")
