"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from blog_sync.core.models.post import Post
from blog_sync.git.manager import RepositoryManager
from blog_sync.git.runner import GitRunner
from blog_sync.repositories.posts.sqlite import SQLitePostRepository
from blog_sync.repositories.settings.sqlite import SQLiteSettingsRepository
from helpers import git


@pytest.fixture(autouse=True)
def isolated_git_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep the user's global git configuration out of the tests."""
    home = tmp_path / "home"
    home.mkdir()
    (home / ".gitconfig").write_text("[init]\n\tdefaultBranch = main\n")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.delenv("GIT_CONFIG_GLOBAL", raising=False)
    return home


@pytest.fixture
def make_remote(tmp_path: Path):
    """Create a bare repository to act as the remote.

    Each listed branch gets the same initial commit with a README.
    """

    def _make(name: str = "blog-site.git", branches: tuple[str, ...] = ("main",)) -> Path:
        remote = tmp_path / "remotes" / name
        remote.mkdir(parents=True)
        git(remote, "init", "--bare", "-q")
        git(remote, "symbolic-ref", "HEAD", "refs/heads/main")
        if branches:
            seed = tmp_path / f"seed-{name}"
            seed.mkdir()
            git(seed, "init", "-q")
            git(seed, "symbolic-ref", "HEAD", f"refs/heads/{branches[0]}")
            (seed / "README.md").write_text("# Blog\n")
            git(seed, "add", "-A")
            git(seed, "commit", "-q", "-m", "Initial commit")
            for branch in branches:
                git(seed, "push", "-q", str(remote), f"HEAD:refs/heads/{branch}")
        return remote

    return _make


@pytest.fixture
def remote_commit(tmp_path: Path):
    """Commit a file to the remote from a separate clone."""
    counter = {"n": 0}

    def _commit(remote: Path, filename: str, content: str, branch: str = "main") -> None:
        counter["n"] += 1
        clone = tmp_path / f"other-clone-{counter['n']}"
        git(tmp_path, "clone", "-q", "--branch", branch, str(remote), str(clone))
        (clone / filename).parent.mkdir(parents=True, exist_ok=True)
        (clone / filename).write_text(content)
        git(clone, "add", "-A")
        git(clone, "commit", "-q", "-m", f"Add {filename}")
        git(clone, "push", "-q", "origin", f"HEAD:refs/heads/{branch}")

    return _commit


@pytest.fixture
async def settings_repo(tmp_path: Path) -> SQLiteSettingsRepository:
    repo = SQLiteSettingsRepository(db_path=str(tmp_path / "blog.db"))
    await repo.initialize()
    yield repo
    await repo.close()


@pytest.fixture
async def post_repo(tmp_path: Path) -> SQLitePostRepository:
    repo = SQLitePostRepository(db_path=str(tmp_path / "blog.db"))
    await repo.initialize()
    yield repo
    await repo.close()


@pytest.fixture
def working_copy(tmp_path: Path) -> Path:
    return tmp_path / "data" / "repository"


@pytest.fixture
def manager(settings_repo: SQLiteSettingsRepository, working_copy: Path) -> RepositoryManager:
    return RepositoryManager(
        settings_repo=settings_repo,
        working_copy_path=working_copy,
        runner=GitRunner(network_timeout=30),
    )


@pytest.fixture
def sample_post() -> Post:
    """Create a sample post for testing."""
    return Post(
        id=7043637385248215040,
        title='Hello "World"',
        markdown_content="# Hello\n\nFirst post.\n",
        created_at=1_600_000_000,
    )
