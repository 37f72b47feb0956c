"""Tests for the post renderer."""

from pathlib import Path

import frontmatter
import pytest

from blog_sync.core.models.post import Post
from blog_sync.export.renderer import Renderer, TemplateName


@pytest.mark.unit
class TestRenderer:
    """Tests for Renderer."""

    def test_hugo_front_matter(self, sample_post: Post) -> None:
        output = Renderer().render(sample_post, TemplateName.HUGO)

        doc = frontmatter.loads(output)
        assert doc["title"] == 'Hello "World"'
        assert doc["draft"] is False
        assert "date: 2020-09-13T12:26:40+00:00" in output
        assert doc.content.strip() == "# Hello\n\nFirst post."

    def test_lastmod_follows_updates(self, sample_post: Post) -> None:
        assert "lastmod: 2020-09-13T12:26:40+00:00" in Renderer().render(sample_post)

        edited = sample_post.model_copy(update={"updated_at": 1_600_086_400})
        output = Renderer().render(edited)

        assert "date: 2020-09-13T12:26:40+00:00" in output
        assert "lastmod: 2020-09-14T12:26:40+00:00" in output

    def test_template_name_as_string(self, sample_post: Post) -> None:
        renderer = Renderer()
        assert renderer.render(sample_post, "hugo.md") == renderer.render(sample_post)

    def test_render_is_deterministic(self, sample_post: Post) -> None:
        assert Renderer().render(sample_post) == Renderer().render(sample_post)

    def test_special_characters_in_title(self) -> None:
        post = Post(id=1, title="Colons: and 'quotes' & <tags>", created_at=0)
        doc = frontmatter.loads(Renderer().render(post))
        assert doc["title"] == "Colons: and 'quotes' & <tags>"

    def test_content_is_not_escaped(self) -> None:
        post = Post(id=1, title="T", markdown_content="a < b && c > d", created_at=0)
        assert "a < b && c > d" in Renderer().render(post)

    def test_missing_template_renders_empty(self, sample_post: Post) -> None:
        assert Renderer().render(sample_post, "missing.md") == ""

    def test_malformed_template_renders_empty(self, sample_post: Post, tmp_path: Path) -> None:
        (tmp_path / "broken.md").write_text("{{ title ")
        assert Renderer(template_dir=tmp_path).render(sample_post, "broken.md") == ""

    def test_unknown_variable_renders_empty(self, sample_post: Post, tmp_path: Path) -> None:
        (tmp_path / "unknown.md").write_text("{{ author }}")
        assert Renderer(template_dir=tmp_path).render(sample_post, "unknown.md") == ""

    def test_custom_template(self, sample_post: Post, tmp_path: Path) -> None:
        (tmp_path / "plain.md").write_text("{{ post_id }}: {{ title }}\n")
        output = Renderer(template_dir=tmp_path).render(sample_post, "plain.md")
        assert output == '7043637385248215040: Hello "World"\n'
