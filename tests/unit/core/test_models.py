"""Tests for core domain models."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from blog_sync.core.models.outcome import Outcome, OutcomeKind
from blog_sync.core.models.post import Post
from blog_sync.core.models.repository import (
    GitCredentials,
    NewRepository,
    RepositoryConfig,
    RepositoryState,
    repository_name_from_url,
)


@pytest.mark.unit
class TestPost:
    """Tests for Post model."""

    def test_create_post_generates_id(self) -> None:
        first = Post(title="A", created_at=1)
        second = Post(title="B", created_at=1)
        assert first.id != second.id
        assert second.id > first.id

    def test_file_name_uses_id(self) -> None:
        post = Post(id=42, title="Test", created_at=1)
        assert post.file_name == "42.md"

    def test_last_modified(self) -> None:
        assert Post(id=1, title="T", created_at=900).last_modified == 900
        assert Post(id=1, title="T", created_at=900, updated_at=1500).last_modified == 1500

    def test_modified_datetime(self) -> None:
        post = Post(id=1, title="T", created_at=0, updated_at=60)
        assert post.modified_datetime.isoformat() == "1970-01-01T00:01:00+00:00"

    def test_created_datetime_is_utc(self) -> None:
        post = Post(id=1, title="T", created_at=0)
        assert post.created_datetime.isoformat() == "1970-01-01T00:00:00+00:00"


@pytest.mark.unit
class TestRepositoryConfig:
    """Tests for RepositoryConfig model."""

    def test_defaults(self) -> None:
        config = RepositoryConfig(
            remote_url="https://example.com/blog-site.git",
            repository_name="blog-site.git",
            author_name="Ada",
            author_email="ada@example.com",
        )
        assert config.active_branch is None
        assert config.last_export_epoch == 0
        assert config.state == RepositoryState.INITIALIZED

    def test_branch_selected_state(self) -> None:
        config = RepositoryConfig(
            remote_url="https://example.com/blog-site.git",
            repository_name="blog-site.git",
            author_name="Ada",
            author_email="ada@example.com",
            active_branch="main",
        )
        assert config.state == RepositoryState.BRANCH_SELECTED

    def test_negative_epoch_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            RepositoryConfig(
                remote_url="https://example.com/x",
                repository_name="x",
                author_name="Ada",
                author_email="ada@example.com",
                last_export_epoch=-1,
            )

    def test_json_round_trip(self) -> None:
        config = RepositoryConfig(
            remote_url="https://example.com/blog-site.git",
            repository_name="blog-site.git",
            author_name="Ada",
            author_email="ada@example.com",
            active_branch="main",
            last_export_epoch=1000,
        )
        assert RepositoryConfig.model_validate_json(config.model_dump_json()) == config


@pytest.mark.unit
class TestNewRepository:
    """Tests for repository input validation."""

    def test_valid_input(self) -> None:
        config = NewRepository(
            remote_url="https://example.com/blog-site.git",
            author_name="Ada",
            author_email="ada@example.com",
        ).to_config()
        assert config.repository_name == "blog-site.git"
        assert config.remote_url == "https://example.com/blog-site.git"

    def test_trailing_slash_is_stripped(self) -> None:
        config = NewRepository(
            remote_url="https://example.com/org/blog-site/",
            author_name="Ada",
            author_email="ada@example.com",
        ).to_config()
        assert config.remote_url == "https://example.com/org/blog-site"
        assert config.repository_name == "blog-site"

    @pytest.mark.parametrize(
        "remote_url",
        ["git@example.com:org/blog.git", "ftp://example.com/blog", "", "https://example.com"],
    )
    def test_bad_url_rejected(self, remote_url: str) -> None:
        with pytest.raises(PydanticValidationError):
            NewRepository(remote_url=remote_url, author_name="Ada", author_email="ada@example.com")

    def test_empty_author_rejected(self) -> None:
        with pytest.raises(PydanticValidationError, match="UserName must not be empty"):
            NewRepository(
                remote_url="https://example.com/blog.git",
                author_name="   ",
                author_email="ada@example.com",
            )

    @pytest.mark.parametrize("email", ["", "a@b", "ada", "ada@example", "ada @example.com"])
    def test_bad_email_rejected(self, email: str) -> None:
        with pytest.raises(PydanticValidationError, match="Invalid email address"):
            NewRepository(
                remote_url="https://example.com/blog.git",
                author_name="Ada",
                author_email=email,
            )


@pytest.mark.unit
class TestRepositoryNameFromUrl:
    """Tests for repository_name_from_url."""

    def test_last_segment(self) -> None:
        assert repository_name_from_url("https://example.com/org/site.git") == "site.git"

    def test_trailing_slash(self) -> None:
        assert repository_name_from_url("https://example.com/org/site/") == "site"

    def test_no_path(self) -> None:
        assert repository_name_from_url("https://example.com") == ""
        assert repository_name_from_url("https://example.com/") == ""


@pytest.mark.unit
class TestGitCredentials:
    """Tests for GitCredentials."""

    def test_token_hidden_in_repr(self) -> None:
        credentials = GitCredentials(token="s3cret")
        assert "s3cret" not in repr(credentials)
        assert "s3cret" not in credentials.model_dump_json()
        assert credentials.token.get_secret_value() == "s3cret"
        assert credentials.username == "git"


@pytest.mark.unit
class TestOutcome:
    """Tests for Outcome."""

    def test_success(self) -> None:
        outcome = Outcome.success(data={"filename": "a.zip"})
        assert outcome.ok is True
        assert outcome.kind == OutcomeKind.OK
        assert outcome.data == {"filename": "a.zip"}

    def test_failure(self) -> None:
        outcome = Outcome.failure(OutcomeKind.RETRY, "Remote unreachable")
        assert outcome.ok is False
        assert outcome.kind == OutcomeKind.RETRY
        assert outcome.message == "Remote unreachable"
