"""Jinja2 template rendering for project scaffolding.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``zenuxs/scaffolder/templates/`` directory and renders them with
project-specific context data.  Rendering never touches the output
directory: results come back as ``TemplateFile`` objects that the
materializer writes later.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from .models import ProjectConfig, TemplateFile


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


def project_context(config: ProjectConfig) -> dict[str, Any]:
    """Context keys shared by every template of a project."""
    return {
        "project_name": config.project_name,
        "project_type": config.project_type.value,
        "identifier": config.identifier,
        "ports": config.ports.as_dict(),
        "frontend_origin": config.ports.frontend_origin,
        "backend_api_url": config.ports.backend_api_url,
    }


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for project scaffolding.

    The renderer discovers ``.j2`` template files under a configurable
    template directory.  Undefined variables are errors, so a template that
    references a value the renderer forgot to pass fails loudly instead of
    producing an empty string.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([], default_for_string=False),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        # Register custom filters
        self.env.filters["jsx_text"] = _jsx_text_filter
        self.env.filters["js_string"] = _js_string_filter

    # -- Single template rendering -----------------------------------------

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"backend/express/server.js.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    def render_file(
        self,
        template_path: str,
        output_path: str,
        context: dict[str, Any],
    ) -> TemplateFile:
        """Render a template into a ``TemplateFile`` at *output_path*.

        The template name and context are kept on the result so the file can
        be re-rendered later with a changed setting.
        """
        return TemplateFile(
            path=output_path,
            content=self.render(template_path, context),
            template=template_path,
            context=dict(context),
        )


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

def _js_string_filter(value: str) -> str:
    """Quote *value* as a single-quoted JavaScript string literal."""
    escaped = re.sub(r"(['\\])", r"\\\1", str(value))
    return f"'{escaped}'"


def _jsx_text_filter(value: str) -> str:
    """Emit *value* as a JSX expression child, so ``{``, ``}`` and ``<`` stay text."""
    return "{" + _js_string_filter(value) + "}"


def gitignore_file(renderer: TemplateRenderer, *, next: bool = False, logs: bool = False) -> TemplateFile:
    """Render the ``.gitignore`` shared by every generated package."""
    return renderer.render_file("shared/gitignore.j2", ".gitignore", {"next": next, "logs": logs})
