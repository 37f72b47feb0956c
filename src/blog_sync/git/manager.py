"""Lifecycle management of the single git working copy."""

import asyncio
import shutil
from pathlib import Path

import structlog

from blog_sync.core.exceptions import (
    BranchNotFoundError,
    GitError,
    GitLockError,
    InvalidRepositoryStateError,
    MergeConflictError,
    NetworkError,
    RepositoryAlreadyExistsError,
    StorageError,
    ValidationError,
)
from blog_sync.core.models.repository import (
    CommitId,
    GitCredentials,
    RepositoryConfig,
    RepositoryState,
)
from blog_sync.git.runner import (
    GitCommandError,
    GitRunner,
    authenticated_url,
    classify_git_error,
    redact_url,
)

logger = structlog.get_logger(__name__)


class RepositoryManager:
    """Owns the one local working copy bound to the configured remote.

    States: ``ABSENT -> INITIALIZED -> BRANCH_SELECTED``. ``pull``,
    ``commit_all`` and ``push`` require ``BRANCH_SELECTED``. The config is
    passed into every call and never cached here.

    Credentials are only ever placed in the URL of a single git command;
    the working copy's ``origin`` always holds the plain remote URL.
    """

    def __init__(
        self,
        settings_repo,
        working_copy_path: str | Path,
        runner: GitRunner | None = None,
    ) -> None:
        self._store = settings_repo
        self._path = Path(working_copy_path)
        self._runner = runner or GitRunner()

    @property
    def working_copy_path(self) -> Path:
        return self._path

    async def state(self) -> RepositoryState:
        """Derive the lifecycle state from the stored config."""
        config = await self._store.get_repository_config()
        if config is None:
            return RepositoryState.ABSENT
        return config.state

    # --- Lifecycle ---

    async def new_repository(
        self,
        config: RepositoryConfig,
        credentials: GitCredentials | None = None,
    ) -> RepositoryConfig:
        """Clone or initialize the working copy and persist ``config``."""
        if await self._store.get_repository_config() is not None:
            raise RepositoryAlreadyExistsError(
                "A git repository is already configured. Remove it first.",
                details={"remote_url": config.remote_url},
            )
        config = config.model_copy(update={"active_branch": None, "last_export_epoch": 0})

        await self._remove_working_copy()
        self._path.parent.mkdir(parents=True, exist_ok=True)

        if await self._remote_has_refs(config, credentials):
            await self._remote_git(
                config,
                credentials,
                "clone repository",
                "clone",
                authenticated_url(config.remote_url, credentials),
                str(self._path),
                cwd=self._path.parent,
            )
            await self._git("set remote url", "remote", "set-url", "origin", config.remote_url)
            mode = "clone"
        else:
            self._path.mkdir(parents=True, exist_ok=True)
            await self._git("initialize repository", "init")
            await self._git("add remote", "remote", "add", "origin", config.remote_url)
            mode = "init"

        try:
            await self._store.put_repository_config(config)
        except StorageError:
            await self._remove_working_copy()
            raise

        logger.info(
            "Repository created",
            repository=config.repository_name,
            mode=mode,
            path=str(self._path),
        )
        return config

    async def list_remote_branches(
        self,
        config: RepositoryConfig,
        credentials: GitCredentials | None = None,
    ) -> list[str]:
        """List branch names on the remote without touching local state."""
        output = await self._remote_git(
            config,
            credentials,
            "list remote branches",
            "ls-remote",
            "--heads",
            authenticated_url(config.remote_url, credentials),
            cwd=self._path if self._path.exists() else self._path.parent,
        )
        prefix = "refs/heads/"
        branches = []
        for line in output.splitlines():
            _, _, ref = line.partition("\t")
            if ref.startswith(prefix):
                branches.append(ref[len(prefix):])
        return sorted(branches)

    async def set_branch(
        self,
        config: RepositoryConfig,
        branch_name: str,
        credentials: GitCredentials | None = None,
    ) -> RepositoryConfig:
        """Check out ``branch_name`` and persist it as the active branch.

        When the remote has no branches at all the branch is created as an
        unborn local branch; the first push creates it on the remote.
        """
        await self._check_branch_name(branch_name)
        branches = await self.list_remote_branches(config, credentials)

        if branch_name in branches:
            await self._fetch_branch(config, credentials, branch_name)
            if await self._has_ref(f"refs/heads/{branch_name}"):
                await self._git("switch branch", "checkout", branch_name)
            else:
                await self._git(
                    "switch branch",
                    "checkout",
                    "-b",
                    branch_name,
                    "--track",
                    f"origin/{branch_name}",
                )
        elif branches:
            raise BranchNotFoundError(
                f"Remote has no branch named '{branch_name}'",
                details={"branch": branch_name, "available": branches},
            )
        elif await self._has_ref(f"refs/heads/{branch_name}"):
            await self._git("switch branch", "checkout", branch_name)
        elif await self._has_ref("HEAD"):
            await self._git("create branch", "checkout", "-b", branch_name)
        else:
            await self._git(
                "create branch", "symbolic-ref", "HEAD", f"refs/heads/{branch_name}"
            )

        updated = config.model_copy(update={"active_branch": branch_name})
        await self._store.put_repository_config(updated)
        logger.info("Branch selected", branch=branch_name)
        return updated

    async def pull(
        self,
        config: RepositoryConfig,
        credentials: GitCredentials | None = None,
    ) -> None:
        """Fetch the active branch and fast-forward to it.

        Never merges: a diverged working copy raises ``MergeConflictError``
        and should be reinitialized.
        """
        branch = self._require_branch(config)
        if not await self._fetch_branch(config, credentials, branch):
            logger.info("Remote branch does not exist yet, nothing to pull", branch=branch)
            return

        try:
            await self._runner.run(
                "merge", "--ff-only", f"refs/remotes/origin/{branch}", cwd=self._path
            )
        except GitCommandError as e:
            error = classify_git_error(e, "pull")
            if isinstance(error, GitLockError):
                raise error from e
            raise MergeConflictError(
                f"Cannot fast-forward '{branch}' to the remote state; "
                "the repository needs to be reinitialized",
                details={"branch": branch, "stderr": e.stderr},
            ) from e
        logger.info("Pulled remote changes", branch=branch)

    async def commit_all(self, config: RepositoryConfig, message: str) -> CommitId | None:
        """Stage everything and commit. Returns ``None`` if nothing changed."""
        self._require_branch(config)
        await self._git("stage changes", "add", "-A")
        status = await self._git("read status", "status", "--porcelain")
        if not status:
            logger.info("Nothing to commit")
            return None

        await self._git(
            "commit",
            "-c",
            f"user.name={config.author_name}",
            "-c",
            f"user.email={config.author_email}",
            "-c",
            "commit.gpgsign=false",
            "commit",
            "-q",
            "-m",
            message,
        )
        commit = await self._git("read commit", "rev-parse", "HEAD")
        logger.info("Committed changes", commit=commit[:8], files=len(status.splitlines()))
        return commit

    async def push(self, config: RepositoryConfig, credentials: GitCredentials | None) -> None:
        """Push the active branch to the remote with a one-shot credential."""
        branch = self._require_branch(config)
        if not await self._has_ref("HEAD"):
            logger.info("No commits on branch, nothing to push", branch=branch)
            return
        await self._remote_git(
            config,
            credentials,
            "push",
            "push",
            authenticated_url(config.remote_url, credentials),
            f"HEAD:refs/heads/{branch}",
        )
        logger.info("Pushed to remote", branch=branch, repository=config.repository_name)

    async def remove_repository(self) -> None:
        """Delete the working copy and the stored config.

        A missing or partially deleted working copy is not an error.
        """
        await self._remove_working_copy()
        await self._store.delete_repository_config()
        logger.info("Repository removed", path=str(self._path))

    # --- Helpers ---

    @staticmethod
    def _require_branch(config: RepositoryConfig) -> str:
        if config.state is not RepositoryState.BRANCH_SELECTED or not config.active_branch:
            raise InvalidRepositoryStateError(
                "Select a branch before syncing",
                details={"state": config.state.value},
            )
        return config.active_branch

    async def _check_branch_name(self, branch_name: str) -> None:
        if not branch_name or branch_name.startswith("-"):
            raise ValidationError(f"Invalid branch name: '{branch_name}'")
        try:
            await self._runner.run("check-ref-format", "--branch", branch_name)
        except GitCommandError as e:
            raise ValidationError(
                f"Invalid branch name: '{branch_name}'", details={"stderr": e.stderr}
            ) from e

    async def _remote_has_refs(
        self, config: RepositoryConfig, credentials: GitCredentials | None
    ) -> bool:
        """Whether the remote is reachable and has at least one ref."""
        try:
            output = await self._remote_git(
                config,
                credentials,
                "probe remote",
                "ls-remote",
                authenticated_url(config.remote_url, credentials),
                cwd=self._path.parent,
            )
        except (NetworkError, GitError) as e:
            logger.warning(
                "Remote not usable for clone, initializing empty repository",
                remote_url=config.remote_url,
                error=str(e),
            )
            return False
        return bool(output)

    async def _fetch_branch(
        self,
        config: RepositoryConfig,
        credentials: GitCredentials | None,
        branch: str,
    ) -> bool:
        """Fetch one branch into ``refs/remotes/origin``. False if it does not exist."""
        try:
            await self._remote_git(
                config,
                credentials,
                "fetch",
                "fetch",
                "--quiet",
                authenticated_url(config.remote_url, credentials),
                f"+refs/heads/{branch}:refs/remotes/origin/{branch}",
            )
        except (GitError, NetworkError) as e:
            if "couldn't find remote ref" in e.details.get("stderr", "").lower():
                return False
            raise
        return True

    async def _has_ref(self, ref: str) -> bool:
        try:
            await self._runner.run("rev-parse", "--verify", "--quiet", ref, cwd=self._path)
        except (GitCommandError, FileNotFoundError):
            return False
        return True

    async def _git(self, action: str, *args: str) -> str:
        """Run a local git command in the working copy."""
        try:
            return await self._runner.run(*args, cwd=self._path)
        except GitCommandError as e:
            raise classify_git_error(e, action) from e
        except FileNotFoundError as e:
            raise GitError(
                f"Failed to {action}: working copy or git executable missing",
                details={"path": str(self._path)},
            ) from e

    async def _remote_git(
        self,
        config: RepositoryConfig,
        credentials: GitCredentials | None,
        action: str,
        *args: str,
        cwd: Path | None = None,
    ) -> str:
        """Run a git command that talks to the remote, under the network deadline.

        Runs in the working copy unless ``cwd`` is given.
        """
        workdir = cwd if cwd is not None else self._path
        try:
            output = await self._runner.run(*args, cwd=workdir, remote=True)
        except GitCommandError as e:
            e.stderr = redact_url(e.stderr, config.remote_url, credentials)
            raise classify_git_error(e, action) from None
        except FileNotFoundError as e:
            raise GitError(
                f"Failed to {action}: working copy or git executable missing",
                details={"path": str(workdir)},
            ) from e
        return redact_url(output, config.remote_url, credentials)

    async def _remove_working_copy(self) -> None:
        await asyncio.to_thread(shutil.rmtree, self._path, ignore_errors=True)
