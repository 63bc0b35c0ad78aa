"""Document rendering and template composition."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import markdown
from jinja2 import Environment, FileSystemLoader, TemplateError

BUNDLED_TEMPLATES_DIR = Path(__file__).with_name("templates")
TEMPLATE_SUFFIX = ".j2"
MARKDOWN_EXTENSIONS = ("extra",)


class RenderError(RuntimeError):
    """Raised when a document body or template fails to render."""


def create_environment(templates_dir: Path | None = None) -> Environment:
    """Build the Jinja environment shared by the renderer and compositor.

    Site templates shadow the bundled defaults of the same name.
    """
    directories = []
    if templates_dir:
        directories.append(str(templates_dir))
    directories.append(str(BUNDLED_TEMPLATES_DIR))
    seen: set[str] = set()
    ordered: list[str] = []
    for directory in directories:
        if directory not in seen:
            ordered.append(directory)
            seen.add(directory)
    loader = FileSystemLoader(ordered)
    return Environment(loader=loader, autoescape=False, trim_blocks=True, lstrip_blocks=True)


class DocumentRenderer:
    """Turns a document body into an HTML fragment based on its format tag."""

    def __init__(self, environment: Environment) -> None:
        self._env = environment

    def render(self, body: str, format_tag: str) -> str:
        tag = format_tag.lower()
        if tag == "md":
            # A fresh converter per call; markdown.Markdown instances keep state.
            return markdown.markdown(body, extensions=list(MARKDOWN_EXTENSIONS))
        if tag == "html":
            return body
        if tag == "j2":
            try:
                return self._env.from_string(body).render()
            except TemplateError as exc:
                raise RenderError(f"Failed to render template body: {exc}") from exc
            except Exception as exc:  # expressions in a template can raise anything
                raise RenderError(
                    f"Template body raised {type(exc).__name__}: {exc}"
                ) from exc
        raise RenderError(f"No renderer for format {format_tag!r}")


class TemplateCompositor:
    """Wraps rendered bodies into full pages using named templates."""

    def __init__(self, environment: Environment) -> None:
        self._env = environment

    def compose(
        self,
        template_name: str,
        contents: str,
        page: Optional[Mapping[str, Any]] = None,
        **extra: Any,
    ) -> str:
        variables: Dict[str, Any] = {"contents": contents, "page": dict(page or {})}
        variables.update(extra)
        try:
            template = self._env.get_template(f"{template_name}{TEMPLATE_SUFFIX}")
            return template.render(**variables)
        except TemplateError as exc:
            raise RenderError(f"Template {template_name!r} failed: {exc}") from exc
        except Exception as exc:  # expressions in a template can raise anything
            raise RenderError(
                f"Template {template_name!r} raised {type(exc).__name__}: {exc}"
            ) from exc


__all__ = [
    "BUNDLED_TEMPLATES_DIR",
    "DocumentRenderer",
    "RenderError",
    "TemplateCompositor",
    "create_environment",
]
