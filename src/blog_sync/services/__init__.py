"""Business logic services for blog-sync."""

from blog_sync.services.git_pages import GitPagesService
from blog_sync.services.sync import SyncOrchestrator

__all__ = [
    "GitPagesService",
    "SyncOrchestrator",
]
