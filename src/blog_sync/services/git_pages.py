"""Caller-facing operations for publishing the blog to a git repository."""

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError

from blog_sync.core.exceptions import (
    BlogSyncError,
    BranchNotFoundError,
    GitLockError,
    InvalidRepositoryStateError,
    MergeConflictError,
    NetworkError,
    PushRejectedError,
    RepositoryNotConfiguredError,
    SyncInProgressError,
    ValidationError,
)
from blog_sync.core.models.outcome import Outcome, OutcomeKind
from blog_sync.core.models.repository import (
    GitCredentials,
    NewRepository,
    RepositoryConfig,
    RepositoryState,
)
from blog_sync.export.pipeline import ExportPipeline
from blog_sync.git.manager import RepositoryManager
from blog_sync.services.sync import SyncOrchestrator

logger = structlog.get_logger(__name__)


def outcome_for_error(error: Exception) -> Outcome:
    """Translate an exception into a user-facing outcome."""
    if isinstance(
        error,
        (
            ValidationError,
            RepositoryNotConfiguredError,
            BranchNotFoundError,
            InvalidRepositoryStateError,
        ),
    ):
        return Outcome.failure(OutcomeKind.INVALID_INPUT, error.message)
    if isinstance(error, SyncInProgressError):
        return Outcome.failure(OutcomeKind.BUSY, error.message)
    if isinstance(error, MergeConflictError):
        return Outcome.failure(OutcomeKind.REPAIR, error.message)
    if isinstance(error, (NetworkError, GitLockError, PushRejectedError)):
        return Outcome.failure(OutcomeKind.RETRY, error.message)
    if isinstance(error, BlogSyncError):
        return Outcome.failure(OutcomeKind.OPERATOR, error.message)
    return Outcome.failure(OutcomeKind.OPERATOR, "Internal error, please contact the operator.")


def _validation_message(error: PydanticValidationError) -> str:
    messages = []
    for item in error.errors():
        cause = item.get("ctx", {}).get("error")
        messages.append(str(cause) if cause is not None else f"{item['loc'][-1]}: {item['msg']}")
    return " ".join(messages)


class GitPagesService:
    """Operation surface used by the HTTP layer and the CLI.

    Every repository operation runs under one lock. Lifecycle operations
    wait for it; a push that finds it held is rejected as busy. Each method
    returns an ``Outcome`` and never raises.
    """

    def __init__(
        self,
        settings_repo,
        repository_manager: RepositoryManager,
        sync_orchestrator: SyncOrchestrator,
        export_pipeline: ExportPipeline,
        export_dir: str | Path,
    ) -> None:
        self._store = settings_repo
        self._manager = repository_manager
        self._sync = sync_orchestrator
        self._export = export_pipeline
        self._export_dir = Path(export_dir)
        self._lock = asyncio.Lock()

    @property
    def is_busy(self) -> bool:
        return self._lock.locked()

    async def show(self) -> Outcome:
        """Current configuration, state and, before a branch is chosen, the branch list."""

        async def _show() -> dict[str, Any]:
            config = await self._store.get_repository_config()
            if config is None:
                return {"state": RepositoryState.ABSENT.value, "repository": None, "branches": []}
            branches: list[str] = []
            if config.state is RepositoryState.INITIALIZED:
                branches = await self._manager.list_remote_branches(config)
            return {
                "state": config.state.value,
                "repository": config.model_dump(),
                "branches": branches,
            }

        return await self._run("show", _show)

    async def create(self, remote_url: str, author_name: str, author_email: str) -> Outcome:
        """Validate input and set up the repository."""

        async def _create() -> dict[str, Any]:
            try:
                request = NewRepository(
                    remote_url=remote_url,
                    author_name=author_name,
                    author_email=author_email,
                )
            except PydanticValidationError as e:
                raise ValidationError(_validation_message(e)) from e
            config = await self._manager.new_repository(request.to_config())
            return config.model_dump()

        return await self._run("create", _create)

    async def list_branches(self) -> Outcome:
        async def _list() -> list[str]:
            config = await self._require_config()
            return await self._manager.list_remote_branches(config)

        return await self._run("list_branches", _list)

    async def select_branch(self, name: str) -> Outcome:
        async def _select() -> dict[str, Any]:
            config = await self._require_config()
            updated = await self._manager.set_branch(config, name)
            return updated.model_dump()

        return await self._run("select_branch", _select)

    async def push(self, credentials: GitCredentials | None) -> Outcome:
        """Export changed posts and push them. Rejected while another push runs."""

        async def _push() -> dict[str, Any]:
            result = await self._sync.push(credentials)
            return result.model_dump()

        return await self._run("push", _push, reject_if_busy=True)

    async def remove(self) -> Outcome:
        async def _remove() -> None:
            await self._require_config()
            await self._manager.remove_repository()

        return await self._run("remove", _remove)

    async def export_all_as_archive(self) -> Outcome:
        """Write all posts to a zip archive. Independent of the repository lock."""
        try:
            filename = await self._export.export_all_as_archive(self._export_dir)
        except Exception as e:
            return self._failed("export_archive", e)
        return Outcome.success(data={"filename": filename})

    async def _require_config(self) -> RepositoryConfig:
        config = await self._store.get_repository_config()
        if config is None:
            raise RepositoryNotConfiguredError("No git repository is configured")
        return config

    async def _run(
        self,
        action: str,
        operation: Callable[[], Awaitable[Any]],
        reject_if_busy: bool = False,
    ) -> Outcome:
        if reject_if_busy and self._lock.locked():
            return self._failed(
                action, SyncInProgressError("A sync is already in progress, try again later.")
            )
        async with self._lock:
            try:
                data = await operation()
            except Exception as e:
                return self._failed(action, e)
        return Outcome.success(data=data)

    @staticmethod
    def _failed(action: str, error: Exception) -> Outcome:
        outcome = outcome_for_error(error)
        if isinstance(error, BlogSyncError):
            logger.warning(
                "Operation failed",
                action=action,
                kind=outcome.kind.value,
                error=error.message,
            )
        else:
            logger.exception("Unexpected error", action=action)
        return outcome
