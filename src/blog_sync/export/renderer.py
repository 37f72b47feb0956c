"""Jinja2 renderer for exported posts."""

from enum import Enum
from pathlib import Path

import structlog
from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError

from blog_sync.core.models.post import Post

logger = structlog.get_logger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"


class TemplateName(str, Enum):
    """Publishing targets with a packaged template."""

    HUGO = "hugo.md"


class Renderer:
    """Renders a post into the document text for a publishing target.

    Rendering never raises: a missing or malformed template yields ``""``
    so that one bad post cannot abort a whole export batch.
    """

    def __init__(self, template_dir: Path | None = None) -> None:
        self.template_dir = template_dir or TEMPLATE_DIR
        self.env = Environment(
            loader=FileSystemLoader(self.template_dir),
            autoescape=False,  # markdown, not HTML
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

    def render(self, post: Post, template_name: TemplateName | str = TemplateName.HUGO) -> str:
        """Render ``post`` with the named template."""
        name = template_name.value if isinstance(template_name, TemplateName) else template_name
        try:
            template = self.env.get_template(name)
            return template.render(
                post_id=post.id,
                title=post.title,
                content=post.markdown_content,
                date=post.created_datetime.isoformat(),
                lastmod=post.modified_datetime.isoformat(),
            )
        except TemplateError as e:
            logger.error(
                "Failed to render post",
                post_id=post.id,
                template=name,
                error=str(e),
            )
            return ""
