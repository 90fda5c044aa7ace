"""
Theme Service
=============

Version: 0.1.0
"""

from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from shared.logging import get_logger
from services.assurance.errors import (
    InternalError,
    NotFoundError,
    ValidationError,
    operation_boundary,
)
from services.assurance.models.theme import Theme, ThemePayload
from services.assurance.repositories.base import new_id
from services.assurance.repositories.themes import ThemeRepository
from services.assurance.services.backdating import utc_now
from services.assurance.validators import ThemeValidator, Validator


if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger


class ThemeService:
    """Theme CRUD plus archive/restore."""

    def __init__(
        self,
        themes: ThemeRepository,
        validator: Validator | None = None,
        logger: "BoundLogger | None" = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.themes = themes
        self.validator = validator or ThemeValidator()
        self.logger = logger or get_logger(__name__)
        self.clock = clock

    def _validate(self, payload: ThemePayload, action: str) -> None:
        errors = self.validator.validate(payload)
        if errors:
            raise ValidationError(f"Validation errors occurred whilst {action} the theme", errors)

    @operation_boundary("get_theme")
    async def get(self, theme_id: str) -> Theme:
        theme = await self.themes.get_by_id(theme_id)
        if theme is None:
            raise NotFoundError(f"Theme not found: {theme_id}")
        return theme

    @operation_boundary("list_themes")
    async def list_themes(self, include_archived: bool = False) -> list[Theme]:
        return await self.themes.list_active(include_inactive=include_archived)

    @operation_boundary("list_project_themes")
    async def by_project(self, project_id: str) -> list[Theme]:
        return await self.themes.list_by_project(project_id)

    @operation_boundary("create_theme")
    async def create(self, payload: ThemePayload, created_by: str) -> Theme:
        self._validate(payload, "creating")
        now = self.clock()
        theme = Theme(
            id=new_id(),
            **payload.model_dump(),
            created_at=now,
            updated_at=now,
            created_by=created_by,
            updated_by=created_by,
        )
        if not await self.themes.create(theme):
            raise InternalError("Failed to create the theme")
        self.logger.info("theme_created", theme_id=theme.id, created_by=created_by)
        return theme

    @operation_boundary("update_theme")
    async def update(self, theme_id: str, payload: ThemePayload, updated_by: str) -> Theme:
        self._validate(payload, "updating")
        existing = await self.get(theme_id)
        updated = existing.model_copy(
            update={**payload.model_dump(), "updated_at": self.clock(), "updated_by": updated_by}
        )
        if not await self.themes.replace(theme_id, updated):
            raise NotFoundError(f"Theme not found: {theme_id}")
        self.logger.info("theme_updated", theme_id=theme_id, updated_by=updated_by)
        return updated

    @operation_boundary("delete_theme")
    async def delete(self, theme_id: str) -> None:
        if not await self.themes.delete(theme_id):
            raise NotFoundError(f"Theme not found: {theme_id}")
        self.logger.info("theme_deleted", theme_id=theme_id)

    async def _set_active(self, theme_id: str, active: bool, actor: str) -> None:
        fields = {"is_active": active, "updated_at": self.clock(), "updated_by": actor}
        if not await self.themes.update_fields(theme_id, fields):
            raise NotFoundError(f"Theme not found: {theme_id}")

    @operation_boundary("archive_theme")
    async def archive(self, theme_id: str, archived_by: str) -> None:
        await self._set_active(theme_id, False, archived_by)
        self.logger.info("theme_archived", theme_id=theme_id, archived_by=archived_by)

    @operation_boundary("restore_theme")
    async def restore(self, theme_id: str, restored_by: str) -> None:
        await self._set_active(theme_id, True, restored_by)
        self.logger.info("theme_restored", theme_id=theme_id, restored_by=restored_by)
