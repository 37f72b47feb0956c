"""Git integration module for blog-sync."""

from blog_sync.git.manager import RepositoryManager
from blog_sync.git.runner import GitRunner

__all__ = ["GitRunner", "RepositoryManager"]
