"""Core domain models and interfaces for blog-sync."""

from blog_sync.core.exceptions import (
    AuthenticationFailedError,
    BlogSyncError,
    BranchNotFoundError,
    ConfigurationError,
    ExportError,
    GitError,
    GitLockError,
    InvalidRepositoryStateError,
    MergeConflictError,
    NetworkError,
    NetworkUnavailableError,
    PushRejectedError,
    RepositoryAlreadyExistsError,
    RepositoryNotConfiguredError,
    StorageError,
    SyncInProgressError,
    ValidationError,
)
from blog_sync.core.models import (
    CommitId,
    GitCredentials,
    NewRepository,
    Outcome,
    OutcomeKind,
    Post,
    RepositoryConfig,
    RepositoryState,
    SyncResult,
)

__all__ = [
    # Models
    "Post",
    "RepositoryConfig",
    "RepositoryState",
    "GitCredentials",
    "NewRepository",
    "CommitId",
    "Outcome",
    "OutcomeKind",
    "SyncResult",
    # Exceptions
    "BlogSyncError",
    "ConfigurationError",
    "ValidationError",
    "RepositoryAlreadyExistsError",
    "RepositoryNotConfiguredError",
    "GitError",
    "BranchNotFoundError",
    "MergeConflictError",
    "InvalidRepositoryStateError",
    "GitLockError",
    "PushRejectedError",
    "NetworkError",
    "AuthenticationFailedError",
    "NetworkUnavailableError",
    "StorageError",
    "ExportError",
    "SyncInProgressError",
]
