"""FastAPI dependencies for dependency injection."""

from typing import Annotated

from fastapi import Depends, Request

from blog_sync.config import get_settings
from blog_sync.services.factory import create_git_pages_service
from blog_sync.services.git_pages import GitPagesService


async def get_git_pages_service(request: Request) -> GitPagesService:
    """Get the git pages service from app state.

    One instance per application, so its repository lock is shared by
    all requests.
    """
    if hasattr(request.app.state, "git_pages_service"):
        return request.app.state.git_pages_service

    service, factory = await create_git_pages_service(get_settings())
    if hasattr(request.app.state, "git_pages_service"):
        # another request finished creating it first
        await factory.close()
        return request.app.state.git_pages_service
    request.app.state.git_pages_service = service
    request.app.state.repo_factory = factory
    return service


# Type aliases for dependency injection
GitPagesServiceDep = Annotated[GitPagesService, Depends(get_git_pages_service)]
