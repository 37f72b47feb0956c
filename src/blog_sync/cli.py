"""CLI for blog-sync."""

import asyncio
import sys

import click
import structlog

from blog_sync.config.logging import configure_logging
from blog_sync.core.models.outcome import Outcome

logger = structlog.get_logger(__name__)


def run_async(coro):
    """Run an async function synchronously."""
    return asyncio.run(coro)


def _run_operation(operation) -> Outcome:
    """Build the service, await ``operation(service)`` and close connections."""

    async def _run() -> Outcome:
        from blog_sync.config.settings import get_settings
        from blog_sync.services.factory import create_git_pages_service

        service, factory = await create_git_pages_service(get_settings())
        try:
            return await operation(service)
        finally:
            await factory.close()

    return run_async(_run())


def _report(outcome: Outcome, success: str | None = None) -> None:
    if outcome.ok:
        if success:
            click.echo(success)
        return
    click.echo(f"Error ({outcome.kind.value}): {outcome.message}", err=True)
    sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def cli(verbose: bool) -> None:
    """blog-sync: publish blog posts to a git repository."""
    log_level = "DEBUG" if verbose else "INFO"
    configure_logging(log_level=log_level)


@cli.command()
def serve() -> None:
    """Run the HTTP API."""
    from blog_sync.api.main import run

    run()


@cli.group()
def repo() -> None:
    """Manage the git repository posts are published to."""


@repo.command("create")
@click.argument("remote_url")
@click.option("--name", "-n", "author_name", required=True, help="Commit author name")
@click.option("--email", "-e", "author_email", required=True, help="Commit author email")
def repo_create(remote_url: str, author_name: str, author_email: str) -> None:
    """Configure the repository and create its working copy."""
    outcome = _run_operation(lambda s: s.create(remote_url, author_name, author_email))
    _report(outcome)
    click.echo(f"Repository configured: {outcome.data['repository_name']}")


@repo.command("branches")
def repo_branches() -> None:
    """List branches on the remote."""
    outcome = _run_operation(lambda s: s.list_branches())
    _report(outcome)
    if not outcome.data:
        click.echo("Remote has no branches yet.")
    for branch in outcome.data:
        click.echo(f"  - {branch}")


@repo.command("select")
@click.argument("branch")
def repo_select(branch: str) -> None:
    """Select the branch posts are published to."""
    _report(_run_operation(lambda s: s.select_branch(branch)), f"Active branch: {branch}")


@repo.command("push")
@click.option("--username", "-u", default="git", help="Username for the remote")
@click.option(
    "--token",
    "-t",
    envvar="GIT_TOKEN",
    prompt=True,
    hide_input=True,
    help="Access token or password (default: $GIT_TOKEN)",
)
def repo_push(username: str, token: str) -> None:
    """Export changed posts, commit and push them."""
    from blog_sync.core.models.repository import GitCredentials

    credentials = GitCredentials(username=username, token=token)
    outcome = _run_operation(lambda s: s.push(credentials))
    _report(outcome)
    result = outcome.data
    commit = result["commit"][:8] if result["commit"] else "no changes"
    click.echo(f"Pushed {result['exported']} posts ({commit})")


@repo.command("remove")
@click.confirmation_option(prompt="Delete the working copy and repository settings?")
def repo_remove() -> None:
    """Remove the working copy and its configuration."""
    _report(_run_operation(lambda s: s.remove()), "Repository removed")


@repo.command("status")
def repo_status() -> None:
    """Show the configured repository."""
    outcome = _run_operation(lambda s: s.show())
    _report(outcome)
    data = outcome.data
    click.echo("Repository Status")
    click.echo(f"  State:       {data['state']}")
    repository = data["repository"]
    if repository is None:
        return
    click.echo(f"  Remote:      {repository['remote_url']}")
    click.echo(f"  Author:      {repository['author_name']} <{repository['author_email']}>")
    click.echo(f"  Branch:      {repository['active_branch'] or '(not selected)'}")
    click.echo(f"  Last export: {repository['last_export_epoch']}")
    if data["branches"]:
        click.echo("  Remote branches: " + ", ".join(data["branches"]))


@cli.group()
def export() -> None:
    """One-shot exports."""


@export.command("archive")
def export_archive() -> None:
    """Export every post into a zip archive."""
    from blog_sync.config.settings import get_settings

    outcome = _run_operation(lambda s: s.export_all_as_archive())
    _report(outcome)
    click.echo(f"Archive written: {get_settings().export_dir}/{outcome.data['filename']}")


if __name__ == "__main__":
    cli()
