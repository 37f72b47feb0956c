"""Wiring of repositories, git and export into the service layer."""

from blog_sync.config.settings import Settings
from blog_sync.export.pipeline import ExportPipeline
from blog_sync.git.manager import RepositoryManager
from blog_sync.git.runner import GitRunner
from blog_sync.repositories.factory import RepositoryFactory
from blog_sync.services.git_pages import GitPagesService
from blog_sync.services.sync import SyncOrchestrator


async def create_git_pages_service(
    settings: Settings,
) -> tuple[GitPagesService, RepositoryFactory]:
    """Create the git pages service and the factory owning its connections."""
    factory = RepositoryFactory(settings)
    posts = await factory.get_post_repository()
    settings_store = await factory.get_settings_repository()

    manager = RepositoryManager(
        settings_repo=settings_store,
        working_copy_path=settings.working_copy_path,
        runner=GitRunner(
            git_executable=settings.git_executable,
            network_timeout=settings.git_network_timeout,
        ),
    )
    pipeline = ExportPipeline(post_repo=posts, template=settings.export_template)
    orchestrator = SyncOrchestrator(
        settings_repo=settings_store,
        repository_manager=manager,
        export_pipeline=pipeline,
        posts_subdir=settings.posts_subdir,
    )
    service = GitPagesService(
        settings_repo=settings_store,
        repository_manager=manager,
        sync_orchestrator=orchestrator,
        export_pipeline=pipeline,
        export_dir=settings.export_dir,
    )
    return service, factory
