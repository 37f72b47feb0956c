"""Exception hierarchy for blog-sync.

Errors fall into four user-facing groups: invalid input (``ValidationError``),
local git problems (``GitError``), remote transport problems (``NetworkError``)
and environment problems (``StorageError``, ``ExportError``). The service layer
turns each group into a different kind of ``Outcome``.
"""

from typing import Any


class BlogSyncError(Exception):
    """Base exception for all blog-sync errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class ConfigurationError(BlogSyncError):
    """Invalid application configuration."""


class ValidationError(BlogSyncError):
    """Invalid user input. Recoverable, never retried automatically."""


class RepositoryAlreadyExistsError(ValidationError):
    """A repository is already configured for this server."""


class RepositoryNotConfiguredError(BlogSyncError):
    """No repository has been configured yet."""


class GitError(BlogSyncError):
    """A local git operation failed."""


class BranchNotFoundError(GitError):
    """The remote has no branch with the requested name."""


class MergeConflictError(GitError):
    """The active branch cannot be fast-forwarded to the remote state."""


class InvalidRepositoryStateError(GitError):
    """The operation is not legal in the repository's current state."""


class GitLockError(GitError):
    """Another git process holds the repository lock. Transient."""


class PushRejectedError(GitError):
    """The remote branch moved on since the last pull. Transient."""


class NetworkError(BlogSyncError):
    """Transport failure while talking to the remote."""


class AuthenticationFailedError(NetworkError):
    """The remote rejected the supplied credentials."""


class NetworkUnavailableError(NetworkError):
    """The remote could not be reached within the deadline."""


class StorageError(BlogSyncError):
    """The settings or post store is unavailable."""


class ExportError(BlogSyncError):
    """Writing exported files failed."""


class SyncInProgressError(BlogSyncError):
    """A push is already running against the repository."""
