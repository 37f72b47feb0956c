"""SQLite implementation of the post store."""

from pathlib import Path

import aiosqlite
import structlog

from blog_sync.core.exceptions import StorageError
from blog_sync.core.models.post import Post

logger = structlog.get_logger(__name__)

CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS post (
    id INTEGER PRIMARY KEY,
    title TEXT NOT NULL,
    markdown_content TEXT NOT NULL DEFAULT '',
    created_at INTEGER NOT NULL,
    updated_at INTEGER
);

CREATE INDEX IF NOT EXISTS idx_post_created_at ON post(created_at);
CREATE INDEX IF NOT EXISTS idx_post_updated_at ON post(updated_at);
"""

POST_COLUMNS = "id, title, markdown_content, created_at, updated_at"


class SQLitePostRepository:
    """Read access to persisted blog posts.

    Uses aiosqlite for async SQLite operations. The export pipeline only
    reads; ``save_post`` exists for seeding and tests.
    """

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
                f"Failed to open post store: {e}",
                details={"db_path": self._db_path},
            ) from e
        logger.info("SQLite post repository initialized", db_path=self._db_path)

    async def _ensure_connected(self) -> aiosqlite.Connection:
        if self._db is None:
            await self.initialize()
        assert self._db is not None
        return self._db

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    async def all_posts(self) -> list[Post]:
        """Return every post, oldest first."""
        return await self._fetch(f"SELECT {POST_COLUMNS} FROM post ORDER BY id")

    async def posts_since(self, epoch: int) -> list[Post]:
        """Return posts created or updated at or after ``epoch``."""
        return await self._fetch(
            f"SELECT {POST_COLUMNS} FROM post "
            "WHERE created_at >= ? OR updated_at >= ? ORDER BY id",
            (epoch, epoch),
        )

    async def get_post(self, post_id: int) -> Post | None:
        posts = await self._fetch(
            f"SELECT {POST_COLUMNS} FROM post WHERE id = ?", (post_id,)
        )
        return posts[0] if posts else None

    async def save_post(self, post: Post) -> Post:
        db = await self._ensure_connected()
        try:
            await db.execute(
                """INSERT OR REPLACE INTO post
                (id, title, markdown_content, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)""",
                (
                    post.id,
                    post.title,
                    post.markdown_content,
                    post.created_at,
                    post.updated_at,
                ),
            )
            await db.commit()
        except aiosqlite.Error as e:
            raise StorageError(
                f"Failed to save post: {e}", details={"post_id": post.id}
            ) from e
        return post

    async def _fetch(self, query: str, params: tuple = ()) -> list[Post]:
        db = await self._ensure_connected()
        try:
            cursor = await db.execute(query, params)
            rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise StorageError(f"Failed to read posts: {e}") from e
        return [self._row_to_post(row) for row in rows]

    @staticmethod
    def _row_to_post(row: aiosqlite.Row) -> Post:
        return Post(
            id=row["id"],
            title=row["title"],
            markdown_content=row["markdown_content"] or "",
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
