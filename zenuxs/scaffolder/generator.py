"""Main scaffolding orchestrator.

Takes a ``ProjectConfig``, dispatches it to the renderer registered for its
project type and framework, writes the resulting tree under
``<output_dir>/<project_name>`` and optionally installs dependencies.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path

from zenuxs.utils import print_warning, run_command

from .backend import render_express, render_fastify
from .errors import UnsupportedFrameworkError
from .frontend import render_next, render_react
from .fullstack import BACKEND_DIR, FRONTEND_DIR, compose_fullstack
from .materializer import materialize
from .models import (
    BackendFramework,
    FrontendFramework,
    ProjectConfig,
    ProjectType,
    TemplateFile,
    TemplateOutput,
)
from .templates import TemplateRenderer, project_context

Renderer = Callable[[ProjectConfig, TemplateRenderer], TemplateOutput]


# ---------------------------------------------------------------------------
# Dispatch tables
# ---------------------------------------------------------------------------

FRONTEND_RENDERERS: dict[FrontendFramework, Renderer] = {
    FrontendFramework.REACT: render_react,
    FrontendFramework.NEXT: render_next,
}

BACKEND_RENDERERS: dict[BackendFramework, Renderer] = {
    BackendFramework.EXPRESS: render_express,
    BackendFramework.FASTIFY: render_fastify,
}

FRONTEND_LABELS: dict[FrontendFramework, str] = {
    FrontendFramework.REACT: "React + Vite",
    FrontendFramework.NEXT: "Next.js",
}

BACKEND_LABELS: dict[BackendFramework, str] = {
    BackendFramework.EXPRESS: "Express.js",
    BackendFramework.FASTIFY: "Fastify",
}


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Main scaffolding orchestrator.

    ``render()`` is pure: the same configuration always produces an equal
    ``TemplateOutput``.  ``generate()`` writes that output and
    ``install_dependencies()`` runs the package manager in every generated
    package directory.
    """

    def __init__(self, config: ProjectConfig, renderer: TemplateRenderer | None = None) -> None:
        self.config = config
        self.renderer = renderer or TemplateRenderer()

    # -- Public API --------------------------------------------------------

    def render(self) -> TemplateOutput:
        """Render the whole project in memory, README included."""
        config = self.config
        if config.project_type is ProjectType.FULLSTACK:
            output = compose_fullstack(config, self._render_side, self.renderer)
        elif config.project_type is ProjectType.FRONTEND:
            render = _lookup(FRONTEND_RENDERERS, "frontend", config.frontend.framework)
            output = render(config, self.renderer)
        else:
            render = _lookup(BACKEND_RENDERERS, "backend", config.backend.framework)
            output = render(config, self.renderer)

        output.add(self._readme())
        return output

    async def generate(self, output_dir: str | Path) -> Path:
        """Render the project and write it under *output_dir*.

        Args:
            output_dir: Parent directory where the project folder will be
                created.  A subdirectory named after the project is created
                inside it.

        Returns:
            Path to the generated project root.
        """
        output = self.render()
        project_root = Path(output_dir) / self.config.project_name
        await asyncio.to_thread(materialize, project_root, output)
        return project_root

    def package_dirs(self, project_root: str | Path) -> list[Path]:
        """Directories holding a generated ``package.json``, in install order."""
        root = Path(project_root)
        if self.config.project_type is ProjectType.FULLSTACK:
            return [root / FRONTEND_DIR, root / BACKEND_DIR]
        return [root]

    async def install_dependencies(
        self, project_root: str | Path, package_manager: str = "npm"
    ) -> bool:
        """Run ``<package_manager> install`` in each package directory.

        Output goes straight to the terminal and there is no timeout.  A
        failing or missing package manager only produces a warning.

        Returns:
            ``True`` when every install succeeded, ``False`` when any failed
            or when ``install_deps`` is off.
        """
        if not self.config.install_deps:
            return False

        succeeded = True
        for package_dir in self.package_dirs(project_root):
            try:
                returncode, _, _ = await run_command(
                    [package_manager, "install"],
                    cwd=str(package_dir),
                    capture=False,
                )
            except FileNotFoundError:
                print_warning(
                    f"'{package_manager}' was not found; run '{package_manager} install' "
                    f"in {package_dir} manually."
                )
                return False

            if returncode != 0:
                print_warning(
                    f"'{package_manager} install' failed in {package_dir} "
                    f"(exit code {returncode}); install manually."
                )
                succeeded = False

        return succeeded

    # -- Internal helpers --------------------------------------------------

    def _render_side(self, sub_config: ProjectConfig) -> TemplateOutput:
        return ProjectGenerator(sub_config, self.renderer).render()

    def _readme(self) -> TemplateFile:
        config = self.config
        ctx = {
            **project_context(config),
            "frontend_label": FRONTEND_LABELS[config.frontend.framework] if config.frontend else "",
            "backend_label": BACKEND_LABELS[config.backend.framework] if config.backend else "",
        }
        return self.renderer.render_file("README.md.j2", "README.md", ctx)


def _lookup(table: dict, side: str, framework: object) -> Renderer:
    try:
        return table[framework]
    except KeyError:
        raise UnsupportedFrameworkError(side, framework) from None
