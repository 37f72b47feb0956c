"""Blog post model."""

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from blog_sync.utils.snowflake import generate_id


class Post(BaseModel):
    """A persisted blog post, as handed to the export pipeline.

    Timestamps are epoch seconds. ``updated_at`` is ``None`` until the
    post is edited for the first time.
    """

    id: int = Field(default_factory=generate_id)
    title: str
    markdown_content: str = ""
    created_at: int
    updated_at: int | None = None

    @property
    def file_name(self) -> str:
        return f"{self.id}.md"

    @property
    def last_modified(self) -> int:
        return max(self.created_at, self.updated_at or 0)

    @property
    def created_datetime(self) -> datetime:
        return datetime.fromtimestamp(self.created_at, tz=timezone.utc)

    @property
    def modified_datetime(self) -> datetime:
        return datetime.fromtimestamp(self.last_modified, tz=timezone.utc)
