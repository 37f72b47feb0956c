"""Shared helpers for tests."""

import subprocess
from pathlib import Path

from blog_sync.core.models.repository import RepositoryConfig


def git(cwd: Path, *args: str) -> str:
    """Run a git command for test setup and return stdout."""
    result = subprocess.run(
        ["git", "-c", "user.name=Test", "-c", "user.email=test@test.com", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


def local_config(remote: Path, **overrides) -> RepositoryConfig:
    """Config pointing at a bare repository on disk."""
    values = {
        "remote_url": str(remote),
        "repository_name": remote.name,
        "author_name": "Ada",
        "author_email": "ada@example.com",
    }
    values.update(overrides)
    return RepositoryConfig(**values)
