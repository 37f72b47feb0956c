"""Push workflow: pull, export, commit, push, advance the sync point."""

import time
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path

import structlog

from blog_sync.core.exceptions import RepositoryNotConfiguredError
from blog_sync.core.models.repository import GitCredentials
from blog_sync.core.models.sync import SyncResult
from blog_sync.export.pipeline import ExportPipeline
from blog_sync.git.manager import RepositoryManager

logger = structlog.get_logger(__name__)


def _epoch_now() -> int:
    return int(time.time())


class SyncOrchestrator:
    """Composes the export pipeline and repository manager into one push.

    ``last_export_epoch`` is only advanced after the push succeeded. Any
    failure before that leaves it unchanged, so the next push re-exports
    the same or a larger window of posts.
    """

    def __init__(
        self,
        settings_repo,
        repository_manager: RepositoryManager,
        export_pipeline: ExportPipeline,
        posts_subdir: str = "",
        clock: Callable[[], int] = _epoch_now,
    ) -> None:
        self._store = settings_repo
        self._manager = repository_manager
        self._export = export_pipeline
        self._posts_subdir = posts_subdir
        self._clock = clock

    @property
    def posts_path(self) -> Path:
        return self._manager.working_copy_path / self._posts_subdir

    async def push(self, credentials: GitCredentials | None) -> SyncResult:
        """Run the full push workflow."""
        # 1. Load config
        config = await self._store.get_repository_config()
        if config is None:
            raise RepositoryNotConfiguredError("No git repository is configured")

        log = logger.bind(repository=config.repository_name, branch=config.active_branch)
        log.info("Sync started", last_export_epoch=config.last_export_epoch)

        # 2. Pull; never export into a working copy with unknown remote state
        await self._manager.pull(config, credentials)

        # 3. Export posts changed since the last successful sync; the next
        # cutoff is read before the query
        started_at = self._clock()
        written = await self._export.export_since(self.posts_path, config.last_export_epoch)

        # 4. Commit; nothing to commit is fine
        message = self._commit_message(len(written), started_at)
        commit = await self._manager.commit_all(config, message)

        # 5. Push
        await self._manager.push(config, credentials)

        # 6. Only now advance the sync point
        new_epoch = max(config.last_export_epoch, started_at)
        current = await self._store.get_repository_config()
        if current is None:
            raise RepositoryNotConfiguredError("Repository was removed during sync")
        await self._store.put_repository_config(
            current.model_copy(update={"last_export_epoch": new_epoch})
        )

        log.info(
            "Sync finished",
            exported=len(written),
            commit=commit[:8] if commit else None,
            last_export_epoch=new_epoch,
        )
        return SyncResult(exported=len(written), commit=commit, last_export_epoch=new_epoch)

    @staticmethod
    def _commit_message(exported: int, timestamp: int) -> str:
        stamp = datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        noun = "post" if exported == 1 else "posts"
        return f"Export {exported} {noun} at {stamp} UTC"
