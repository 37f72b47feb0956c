"""Repository factory for creating repository instances."""

from typing import TYPE_CHECKING

import structlog

from blog_sync.repositories.posts.sqlite import SQLitePostRepository
from blog_sync.repositories.settings.sqlite import SQLiteSettingsRepository

if TYPE_CHECKING:
    from blog_sync.config.settings import Settings

logger = structlog.get_logger(__name__)


class RepositoryFactory:
    """Factory for creating repository instances.

    Both stores share the one SQLite database file from settings.
    """

    def __init__(self, settings: "Settings") -> None:
        self._settings = settings
        self._posts: SQLitePostRepository | None = None
        self._settings_store: SQLiteSettingsRepository | None = None

    async def get_post_repository(self) -> SQLitePostRepository:
        """Get or create the post repository."""
        if self._posts is None:
            self._posts = SQLitePostRepository(db_path=self._settings.sqlite_path)
            await self._posts.initialize()
            logger.info("Post repository created", db_path=self._settings.sqlite_path)
        return self._posts

    async def get_settings_repository(self) -> SQLiteSettingsRepository:
        """Get or create the settings repository."""
        if self._settings_store is None:
            self._settings_store = SQLiteSettingsRepository(db_path=self._settings.sqlite_path)
            await self._settings_store.initialize()
            logger.info("Settings repository created", db_path=self._settings.sqlite_path)
        return self._settings_store

    async def close(self) -> None:
        """Close all repository connections."""
        if self._posts is not None:
            await self._posts.close()
        if self._settings_store is not None:
            await self._settings_store.close()
        self._posts = None
        self._settings_store = None
