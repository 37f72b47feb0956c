"""Rendering and exporting posts as static-site files."""

from blog_sync.export.pipeline import ExportPipeline
from blog_sync.export.renderer import Renderer, TemplateName

__all__ = ["ExportPipeline", "Renderer", "TemplateName"]
