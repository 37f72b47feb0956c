"""Repository configuration models."""

import re
from enum import Enum

from pydantic import BaseModel, Field, SecretStr, field_validator, model_validator

EMAIL_REGEX = re.compile(r"^[A-Za-z0-9._%+\-]+@[A-Za-z0-9\-]+(\.[A-Za-z0-9\-]+)*\.[A-Za-z]{2,}$")

CommitId = str


class RepositoryState(str, Enum):
    """Lifecycle of the single configured working copy."""

    ABSENT = "absent"
    INITIALIZED = "initialized"
    BRANCH_SELECTED = "branch_selected"


class RepositoryConfig(BaseModel):
    """Configuration of the one git repository the server publishes to.

    Stored as a single JSON record by the settings repository. Input
    validation happens in ``NewRepository`` before a config is created.
    """

    remote_url: str
    repository_name: str
    author_name: str
    author_email: str
    active_branch: str | None = None
    last_export_epoch: int = Field(default=0, ge=0)

    @property
    def state(self) -> RepositoryState:
        if self.active_branch:
            return RepositoryState.BRANCH_SELECTED
        return RepositoryState.INITIALIZED


class NewRepository(BaseModel):
    """User input for configuring the repository."""

    remote_url: str
    author_name: str
    author_email: str

    @field_validator("remote_url")
    @classmethod
    def _check_remote_url(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith("http"):
            raise ValueError("Url must start with 'http'.")
        return value.rstrip("/")

    @field_validator("author_name")
    @classmethod
    def _check_author_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("UserName must not be empty.")
        return value

    @field_validator("author_email")
    @classmethod
    def _check_author_email(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 5 or not EMAIL_REGEX.match(value):
            raise ValueError("Invalid email address.")
        return value

    @model_validator(mode="after")
    def _check_repository_name(self) -> "NewRepository":
        if not repository_name_from_url(self.remote_url):
            raise ValueError("Illegal repository address.")
        return self

    def to_config(self) -> RepositoryConfig:
        return RepositoryConfig(
            remote_url=self.remote_url,
            repository_name=repository_name_from_url(self.remote_url),
            author_name=self.author_name,
            author_email=self.author_email,
        )


class GitCredentials(BaseModel):
    """One-shot credential for talking to the remote. Never persisted."""

    username: str = "git"
    token: SecretStr


def repository_name_from_url(remote_url: str) -> str:
    """Return the last path segment of a remote URL.

    Returns ``""`` for URLs with no path segment, e.g. ``"https://host/"``.
    """
    url = remote_url.rstrip("/")
    scheme_end = url.find("://")
    path_start = url.find("/", scheme_end + 3 if scheme_end >= 0 else 0)
    if path_start < 0:
        return ""
    return url[url.rfind("/") + 1:]
