"""Sync workflow models."""

from pydantic import BaseModel

from blog_sync.core.models.repository import CommitId


class SyncResult(BaseModel):
    """Summary of one successful push."""

    exported: int
    commit: CommitId | None
    last_export_epoch: int
