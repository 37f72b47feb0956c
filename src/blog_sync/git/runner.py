"""Async wrapper around the git CLI."""

import asyncio
import os
import re
from pathlib import Path
from urllib.parse import quote, urlsplit, urlunsplit

import structlog

from blog_sync.core.exceptions import (
    AuthenticationFailedError,
    GitError,
    GitLockError,
    NetworkUnavailableError,
    PushRejectedError,
)
from blog_sync.core.models.repository import GitCredentials

logger = structlog.get_logger(__name__)

AUTH_FAILURE_PATTERNS = re.compile(
    r"authentication failed|could not read username|could not read password"
    r"|invalid username or password|permission denied \(publickey|returned error: 40[13]"
    r"|http basic: access denied",
    re.IGNORECASE,
)
NETWORK_FAILURE_PATTERNS = re.compile(
    r"could not resolve host|unable to access|failed to connect|connection refused"
    r"|connection timed out|operation timed out|network is unreachable"
    r"|could not read from remote repository|the remote end hung up",
    re.IGNORECASE,
)
LOCK_PATTERNS = re.compile(r"index\.lock|unable to create .*\.lock", re.IGNORECASE)
REJECTED_PATTERNS = re.compile(
    r"\[rejected\]|updates were rejected|non-fast-forward", re.IGNORECASE
)


class GitCommandError(Exception):
    """A git command exited with a non-zero status."""

    def __init__(self, args: tuple[str, ...], returncode: int, stderr: str) -> None:
        super().__init__(f"git {args[0] if args else ''} failed ({returncode}): {stderr}")
        self.command = args
        self.returncode = returncode
        self.stderr = stderr


class GitRunner:
    """Runs git commands as asyncio subprocesses.

    Uses the git CLI directly (no gitpython dependency). Commands that talk
    to the remote are given a deadline; when it passes the process is
    killed and ``NetworkUnavailableError`` is raised.
    """

    def __init__(self, git_executable: str = "git", network_timeout: float = 120.0) -> None:
        self._git = git_executable
        self._network_timeout = network_timeout

    async def run(
        self,
        *args: str,
        cwd: Path | None = None,
        remote: bool = False,
    ) -> str:
        """Run a git command and return stdout.

        Raises ``GitCommandError`` on a non-zero exit.
        """
        env = {
            **os.environ,
            "GIT_TERMINAL_PROMPT": "0",
            "GIT_ASKPASS": "",
            "LC_ALL": "C",
        }
        process = await asyncio.create_subprocess_exec(
            self._git,
            *args,
            cwd=str(cwd) if cwd is not None else None,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=env,
        )
        timeout = self._network_timeout if remote else None
        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            logger.warning("git command timed out", command=args[0], timeout=timeout)
            raise NetworkUnavailableError(
                f"git {args[0]} did not finish within {timeout:.0f}s",
                details={"command": args[0]},
            )

        if process.returncode != 0:
            raise GitCommandError(args, process.returncode, stderr.decode(errors="replace").strip())
        return stdout.decode(errors="replace").strip()


def classify_git_error(error: GitCommandError, action: str) -> Exception:
    """Map a failed git command to the matching blog-sync exception."""
    stderr = error.stderr
    details = {"action": action, "stderr": stderr}
    if AUTH_FAILURE_PATTERNS.search(stderr):
        return AuthenticationFailedError(
            f"Failed to {action}: the remote rejected the credentials", details=details
        )
    if NETWORK_FAILURE_PATTERNS.search(stderr):
        return NetworkUnavailableError(
            f"Failed to {action}: the remote is unreachable", details=details
        )
    if REJECTED_PATTERNS.search(stderr):
        return PushRejectedError(
            f"Failed to {action}: the remote branch has new commits, try again",
            details=details,
        )
    if LOCK_PATTERNS.search(stderr):
        return GitLockError(
            f"Failed to {action}: another git process is using the repository",
            details=details,
        )
    return GitError(f"Failed to {action}: {stderr}", details=details)


def authenticated_url(remote_url: str, credentials: GitCredentials | None) -> str:
    """Embed one-shot credentials into an http(s) remote URL.

    Non-http URLs and calls without credentials return ``remote_url`` as is.
    """
    if credentials is None:
        return remote_url
    parts = urlsplit(remote_url)
    if parts.scheme not in ("http", "https"):
        return remote_url
    host = parts.hostname or ""
    if parts.port:
        host = f"{host}:{parts.port}"
    userinfo = (
        f"{quote(credentials.username, safe='')}:"
        f"{quote(credentials.token.get_secret_value(), safe='')}"
    )
    return urlunsplit((parts.scheme, f"{userinfo}@{host}", parts.path, parts.query, parts.fragment))


def redact_url(text: str, remote_url: str, credentials: GitCredentials | None) -> str:
    """Replace any credential-bearing URL in ``text`` with the plain one."""
    if credentials is None:
        return text
    text = text.replace(authenticated_url(remote_url, credentials), remote_url)
    return text.replace(credentials.token.get_secret_value(), "***")
