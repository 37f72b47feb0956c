"""Domain models for blog-sync."""

from blog_sync.core.models.outcome import Outcome, OutcomeKind
from blog_sync.core.models.post import Post
from blog_sync.core.models.repository import (
    CommitId,
    GitCredentials,
    NewRepository,
    RepositoryConfig,
    RepositoryState,
)
from blog_sync.core.models.sync import SyncResult

__all__ = [
    "Post",
    "RepositoryConfig",
    "RepositoryState",
    "GitCredentials",
    "NewRepository",
    "CommitId",
    "Outcome",
    "OutcomeKind",
    "SyncResult",
]
