"""Tests for dateline.rendering."""

from __future__ import annotations

from pathlib import Path

import pytest

from dateline.rendering import DocumentRenderer, RenderError, TemplateCompositor, create_environment


@pytest.fixture
def environment(tmp_path: Path):
    templates = tmp_path / "templates"
    templates.mkdir()
    (templates / "article.j2").write_text(
        "<h1>{{ page.title }}</h1>{{ contents }}{{ footer | default('') }}", encoding="utf-8"
    )
    return create_environment(templates)


def test_markdown_is_rendered_to_html(environment) -> None:
    html = DocumentRenderer(environment).render("# Title\n\nSome *text*.", "md")

    assert "<h1>Title</h1>" in html
    assert "<em>text</em>" in html


def test_markdown_rendering_is_deterministic(environment) -> None:
    renderer = DocumentRenderer(environment)
    body = "Intro\n\n| a | b |\n|---|---|\n| 1 | 2 |\n"

    assert renderer.render(body, "md") == renderer.render(body, "md")
    assert "<table>" in renderer.render(body, "md")


def test_html_passes_through(environment) -> None:
    assert DocumentRenderer(environment).render("<p>raw</p>", "HTML") == "<p>raw</p>"


def test_jinja_bodies_are_rendered(environment) -> None:
    html = DocumentRenderer(environment).render("{% for n in [1, 2] %}<section>{{ n }}</section>{% endfor %}", "j2")

    assert html == "<section>1</section><section>2</section>"


def test_unknown_format_raises(environment) -> None:
    with pytest.raises(RenderError):
        DocumentRenderer(environment).render("text", "rst")


def test_site_template_is_used_with_extra_vars(environment) -> None:
    compositor = TemplateCompositor(environment)

    html = compositor.compose("article", "<p>x</p>", {"title": "Hi"}, footer="<footer/>")

    assert html == "<h1>Hi</h1><p>x</p><footer/>"


def test_bundled_templates_are_a_fallback(environment) -> None:
    html = TemplateCompositor(environment).compose("presentation", "<section>1</section>", {"title": "Deck"})

    assert "<title>Deck</title>" in html
    assert "<section>1</section>" in html


def test_missing_template_raises_render_error(environment) -> None:
    with pytest.raises(RenderError):
        TemplateCompositor(environment).compose("nope", "", {})


def test_template_runtime_failure_raises_render_error(tmp_path: Path) -> None:
    templates = tmp_path / "templates"
    templates.mkdir()
    (templates / "broken.j2").write_text("{{ page.missing.deeper }}", encoding="utf-8")

    with pytest.raises(RenderError):
        TemplateCompositor(create_environment(templates)).compose("broken", "", {})


def test_jinja_body_runtime_error_raises_render_error(environment) -> None:
    with pytest.raises(RenderError) as excinfo:
        DocumentRenderer(environment).render("{{ 1 + 'a' }}", "j2")

    assert "TypeError" in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, TypeError)


def test_template_arithmetic_error_raises_render_error(tmp_path: Path) -> None:
    templates = tmp_path / "templates"
    templates.mkdir()
    (templates / "divide.j2").write_text("{{ 1 / 0 }}", encoding="utf-8")

    with pytest.raises(RenderError) as excinfo:
        TemplateCompositor(create_environment(templates)).compose("divide", "", {})

    assert isinstance(excinfo.value.__cause__, ZeroDivisionError)
