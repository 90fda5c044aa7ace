"""
Assurance Errors
================

Error taxonomy for assurance operations and the boundary that converts
unexpected failures into internal errors.

Every error carries the HTTP status code it is reported with, so the
transport layer only has to render it.

Version: 0.1.0
"""

import functools
from collections.abc import Awaitable, Callable
from typing import Any, ParamSpec, TypeVar

from fastapi import status

from shared.logging import get_logger


logger = get_logger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


class AssuranceError(Exception):
    """Base error for assurance operations."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(AssuranceError):
    """Payload failed validation; carries every failure found."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = list(errors or [])

    def __str__(self) -> str:
        if not self.errors:
            return self.message
        return f"{self.message}: {'; '.join(self.errors)}"


class NotFoundError(AssuranceError):
    """Referenced entity or history entry does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class ReferentialIntegrityError(AssuranceError):
    """An assessment references a missing or inactive project, standard or profession."""

    status_code = status.HTTP_400_BAD_REQUEST


class InternalError(AssuranceError):
    """Storage failure or unexpected state."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def operation_boundary(
    operation: str,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """
    Wrap a public service operation so only assurance errors escape it.

    Anything else is logged with the operation name and keyword
    arguments, then re-raised as InternalError.
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            try:
                return await func(*args, **kwargs)
            except AssuranceError:
                raise
            except Exception as e:
                context: dict[str, Any] = {
                    key: value for key, value in kwargs.items() if isinstance(value, str | int | bool)
                }
                context.update(_positional_keys(args))
                logger.exception(
                    "operation_failed",
                    operation=operation,
                    error=str(e),
                    error_type=type(e).__name__,
                    **context,
                )
                raise InternalError(f"Failed to {operation.replace('_', ' ')}") from e

        return wrapper

    return decorator


def _positional_keys(args: tuple[Any, ...]) -> dict[str, Any]:
    """Collect string positional arguments (entity ids) after `self`."""
    return {f"arg{index}": value for index, value in enumerate(args[1:]) if isinstance(value, str)}
