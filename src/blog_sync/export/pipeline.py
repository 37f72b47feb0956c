"""Export pipeline: posts to rendered files."""

import asyncio
import uuid
import zipfile
from collections.abc import Callable
from pathlib import Path

import structlog

from blog_sync.core.exceptions import ExportError
from blog_sync.core.models.post import Post
from blog_sync.export.renderer import Renderer, TemplateName

logger = structlog.get_logger(__name__)


class ExportPipeline:
    """Writes one rendered ``<post_id>.md`` file per post.

    Rendering failures are per post and skip only that post. Filesystem
    failures abort the call with ``ExportError``; files written before the
    failure stay on disk and are overwritten by the next export.
    """

    def __init__(
        self,
        post_repo,
        renderer: Renderer | None = None,
        template: TemplateName | str = TemplateName.HUGO,
    ) -> None:
        self._posts = post_repo
        self._renderer = renderer or Renderer()
        self._template = template

    async def export_all(self, destination_dir: Path) -> list[Path]:
        """Export every post into ``destination_dir``."""
        posts = await self._posts.all_posts()
        return await self._export_to_dir(posts, Path(destination_dir))

    async def export_since(self, destination_dir: Path, cutoff_epoch: int) -> list[Path]:
        """Export posts created or updated at or after ``cutoff_epoch``."""
        posts = await self._posts.posts_since(cutoff_epoch)
        logger.info(
            "Exporting posts since cutoff",
            cutoff_epoch=cutoff_epoch,
            posts=len(posts),
        )
        return await self._export_to_dir(posts, Path(destination_dir))

    async def export_all_as_archive(self, export_dir: Path) -> str:
        """Write every post into a new zip archive and return its file name."""
        posts = await self._posts.all_posts()
        export_dir = Path(export_dir)
        filename = f"{uuid.uuid4().hex}.zip"
        archive_path = export_dir / filename

        def _write_archive() -> int:
            export_dir.mkdir(parents=True, exist_ok=True)
            with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
                return self._write_posts(posts, zf.writestr)

        try:
            written = await asyncio.to_thread(_write_archive)
        except OSError as e:
            raise ExportError(
                f"Failed to write archive: {e}",
                details={"path": str(archive_path)},
            ) from e

        logger.info("Archive exported", archive=filename, posts=written)
        return filename

    async def _export_to_dir(self, posts: list[Post], destination_dir: Path) -> list[Path]:
        written: list[Path] = []

        def _write_file(name: str, content: str) -> None:
            path = destination_dir / name
            path.write_text(content, encoding="utf-8")
            written.append(path)

        def _write_all() -> None:
            destination_dir.mkdir(parents=True, exist_ok=True)
            self._write_posts(posts, _write_file)

        try:
            await asyncio.to_thread(_write_all)
        except OSError as e:
            raise ExportError(
                f"Failed to export posts: {e}",
                details={"destination": str(destination_dir), "written": len(written)},
            ) from e

        logger.info("Posts exported", count=len(written), destination=str(destination_dir))
        return written

    def _write_posts(self, posts: list[Post], write: Callable[[str, str], None]) -> int:
        """Render each post and hand ``(file_name, content)`` to ``write``."""
        count = 0
        for post in posts:
            content = self._renderer.render(post, self._template)
            if not content:
                logger.warning("Skipping post with empty render", post_id=post.id)
                continue
            write(post.file_name, content)
            count += 1
        return count
