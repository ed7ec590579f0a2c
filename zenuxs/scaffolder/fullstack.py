"""Full-stack composition and the frontend/backend wiring pass.

A full-stack project is two independent sub-projects nested under
``frontend/`` and ``backend/``.  When ``auto_connect`` is on, the wiring
pass then edits the in-memory tree so the two halves talk to each other:

- ``frontend/.env.local`` points the frontend at the local backend API,
- an axios API client is added to the frontend (and ``axios`` to its
  manifest),
- ``backend/server.js`` is re-rendered with CORS scoped to the frontend
  origin,
- a root ``DEPLOYMENT.md`` is added.

Every edit targets a named value (the ``cors_origin`` render setting, the
manifest's dependency map), never a literal substring, and a missing
target raises ``WiringError`` before anything is written to disk.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from .backend import SERVER_ENTRY
from .errors import WiringError
from .features import DATABASE_LABELS
from .models import FrontendFramework, PackageManifest, ProjectConfig, TemplateFile, TemplateOutput
from .templates import TemplateRenderer, project_context

RenderSide = Callable[[ProjectConfig], TemplateOutput]

FRONTEND_DIR = "frontend"
BACKEND_DIR = "backend"

AXIOS_VERSION = "^1.6.0"


@dataclasses.dataclass(frozen=True)
class _ApiClientLayout:
    env_var: str
    env_expr: str
    client_stem: str
    build_dir: str


_API_CLIENTS: dict[FrontendFramework, _ApiClientLayout] = {
    FrontendFramework.REACT: _ApiClientLayout(
        env_var="VITE_API_URL",
        env_expr="import.meta.env.VITE_API_URL",
        client_stem="src/utils/api",
        build_dir="dist",
    ),
    FrontendFramework.NEXT: _ApiClientLayout(
        env_var="NEXT_PUBLIC_API_URL",
        env_expr="process.env.NEXT_PUBLIC_API_URL",
        client_stem="lib/api",
        build_dir=".next",
    ),
}


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------


def compose_fullstack(
    config: ProjectConfig,
    render_side: RenderSide,
    renderer: TemplateRenderer,
) -> TemplateOutput:
    """Render both halves of a full-stack project and wire them together.

    Args:
        config: A ``fullstack`` configuration.
        render_side: Callback rendering a single-side configuration (the
            generator's own dispatch), so each sub-tree is exactly what a
            stand-alone project with that configuration would contain.
        renderer: Template renderer used by the wiring pass.
    """
    output = TemplateOutput()
    output.merge(render_side(config.frontend_config()).nested(FRONTEND_DIR))
    output.merge(render_side(config.backend_config()).nested(BACKEND_DIR))

    if config.auto_connect:
        wire_fullstack(output, config, renderer)
    return output


# ---------------------------------------------------------------------------
# Wiring pass
# ---------------------------------------------------------------------------


def wire_fullstack(output: TemplateOutput, config: ProjectConfig, renderer: TemplateRenderer) -> None:
    """Connect the nested frontend and backend of *output* in place."""
    if config.frontend is None or config.backend is None:
        raise WiringError("Wiring requires both a frontend and a backend")

    layout = _API_CLIENTS[config.frontend.framework]
    ctx: dict[str, Any] = {
        **project_context(config),
        "api_env_var": layout.env_var,
        "api_env_expr": layout.env_expr,
        "api_url": config.ports.backend_api_url,
        "auth": config.backend.auth,
        "typescript": config.frontend.typescript,
        "database_label": DATABASE_LABELS[config.backend.database.value],
        "frontend_build_dir": layout.build_dir,
    }
    ext = "ts" if config.frontend.typescript else "js"

    output.add(renderer.render_file("fullstack/env.local.j2", f"{FRONTEND_DIR}/.env.local", ctx))
    output.add(
        renderer.render_file("fullstack/api.j2", f"{FRONTEND_DIR}/{layout.client_stem}.{ext}", ctx)
    )
    add_manifest_dependencies(output, f"{FRONTEND_DIR}/package.json", {"axios": AXIOS_VERSION})
    set_render_value(
        output,
        f"{BACKEND_DIR}/{SERVER_ENTRY}",
        "cors_origin",
        config.ports.frontend_origin,
        renderer,
    )
    output.add(renderer.render_file("fullstack/DEPLOYMENT.md.j2", "DEPLOYMENT.md", ctx))


def add_manifest_dependencies(
    output: TemplateOutput, path: str, packages: dict[str, str]
) -> None:
    """Add *packages* to the ``dependencies`` of the manifest at *path*."""
    file = output.get(path)
    if file is None:
        raise WiringError(f"No manifest to wire at {path}")
    try:
        manifest = PackageManifest.model_validate_json(file.content)
    except ValidationError as exc:
        raise WiringError(f"Manifest at {path} cannot be parsed: {exc}") from exc

    manifest.add_dependencies(packages)
    output.replace(dataclasses.replace(file, content=manifest.to_json()))


def set_render_value(
    output: TemplateOutput,
    path: str,
    key: str,
    value: Any,
    renderer: TemplateRenderer,
) -> TemplateFile:
    """Re-render the file at *path* with one context value changed.

    The file must have been produced by ``TemplateRenderer.render_file``
    with *key* in its context; anything else raises ``WiringError``.
    """
    file = output.get(path)
    if file is None:
        raise WiringError(f"No file to wire at {path}")
    if file.template is None or key not in file.context:
        raise WiringError(f"{path} was not rendered with a {key!r} setting")

    context = {**file.context, key: value}
    updated = dataclasses.replace(
        file,
        content=renderer.render(file.template, context),
        context=context,
    )
    output.replace(updated)
    return updated
