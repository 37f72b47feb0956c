"""SQLite implementation of the settings store.

Settings are named text records. The git repository configuration is one
of them, stored as JSON under ``REPOSITORY_SETTING``.
"""

import time
from pathlib import Path

import aiosqlite
import structlog
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from blog_sync.core.exceptions import StorageError
from blog_sync.core.models.repository import RepositoryConfig

logger = structlog.get_logger(__name__)

REPOSITORY_SETTING = "git_repository"

CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS settings (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    item TEXT NOT NULL UNIQUE,
    content TEXT NOT NULL DEFAULT '',
    created_at INTEGER NOT NULL,
    updated_at INTEGER NOT NULL
);
"""


class Setting(BaseModel):
    """A named settings record."""

    item: str
    content: str
    created_at: int
    updated_at: int


class SQLiteSettingsRepository:
    """Settings store, including the repository configuration record."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._db: aiosqlite.Connection | None = None

    async def initialize(self) -> None:
        """Initialize the database and create tables."""
        try:
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
            self._db = await aiosqlite.connect(self._db_path)
            self._db.row_factory = aiosqlite.Row
            await self._db.executescript(CREATE_TABLES_SQL)
            await self._db.commit()
        except (aiosqlite.Error, OSError) as e:
            raise StorageError(
                f"Failed to open settings store: {e}",
                details={"db_path": self._db_path},
            ) from e
        logger.info("SQLite settings repository initialized", db_path=self._db_path)

    async def _ensure_connected(self) -> aiosqlite.Connection:
        if self._db is None:
            await self.initialize()
        assert self._db is not None
        return self._db

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    # --- Generic settings ---

    async def get_setting(self, item: str) -> Setting | None:
        db = await self._ensure_connected()
        try:
            cursor = await db.execute(
                "SELECT item, content, created_at, updated_at FROM settings WHERE item = ?",
                (item,),
            )
            row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise StorageError(f"Failed to read setting: {e}", details={"item": item}) from e
        if row is None:
            return None
        return Setting(
            item=row["item"],
            content=row["content"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    async def update_setting(self, item: str, content: str) -> None:
        """Update the named setting, inserting it when it does not exist yet."""
        db = await self._ensure_connected()
        now = int(time.time())
        try:
            cursor = await db.execute(
                "UPDATE settings SET content = ?, updated_at = ? WHERE item = ?",
                (content, now, item),
            )
            if cursor.rowcount < 1:
                await db.execute(
                    "INSERT INTO settings (item, content, created_at, updated_at) "
                    "VALUES (?, ?, ?, ?)",
                    (item, content, now, now),
                )
            await db.commit()
        except aiosqlite.Error as e:
            raise StorageError(f"Failed to save setting: {e}", details={"item": item}) from e

    async def delete_setting(self, item: str) -> bool:
        db = await self._ensure_connected()
        try:
            cursor = await db.execute("DELETE FROM settings WHERE item = ?", (item,))
            await db.commit()
        except aiosqlite.Error as e:
            raise StorageError(f"Failed to delete setting: {e}", details={"item": item}) from e
        return cursor.rowcount > 0

    # --- Repository configuration ---

    async def get_repository_config(self) -> RepositoryConfig | None:
        """Return the stored repository config, or ``None`` if not configured."""
        setting = await self.get_setting(REPOSITORY_SETTING)
        if setting is None:
            return None
        try:
            return RepositoryConfig.model_validate_json(setting.content)
        except PydanticValidationError as e:
            raise StorageError(
                "Stored repository configuration is corrupt",
                details={"item": REPOSITORY_SETTING, "error": str(e)},
            ) from e

    async def put_repository_config(self, config: RepositoryConfig) -> None:
        await self.update_setting(REPOSITORY_SETTING, config.model_dump_json())

    async def delete_repository_config(self) -> bool:
        return await self.delete_setting(REPOSITORY_SETTING)
