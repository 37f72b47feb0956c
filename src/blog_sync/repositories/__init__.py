"""Persistence layer for blog-sync."""

from blog_sync.repositories.factory import RepositoryFactory

__all__ = ["RepositoryFactory"]
