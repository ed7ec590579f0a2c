"""Interactive collection of a ``ProjectConfig``.

Questions are asked with ``rich.prompt`` and the answers are validated by
the pydantic models, so everything the renderers receive is already
resolved (defaults applied, inapplicable options switched off).
"""

from __future__ import annotations

from typing import Any

from rich.prompt import Confirm, Prompt

from zenuxs.config import DevServerPorts
from zenuxs.scaffolder.models import (
    BackendFramework,
    Database,
    FrontendFramework,
    ProjectConfig,
    ProjectType,
)
from zenuxs.utils import console


def _choose(question: str, values: list[str], default: str) -> str:
    return Prompt.ask(question, choices=values, default=default, console=console)


def _confirm(question: str, default: bool) -> bool:
    return Confirm.ask(question, default=default, console=console)


# ---------------------------------------------------------------------------
# Question groups
# ---------------------------------------------------------------------------


def ask_frontend_options(framework: FrontendFramework, suffix: str = "") -> dict[str, Any]:
    """Language, styling and (React only) auth page questions."""
    answers: dict[str, Any] = {
        "framework": framework,
        "typescript": _confirm(f"Use TypeScript{suffix}?", True),
        "tailwind": _confirm(f"Include TailwindCSS{suffix}?", True),
    }
    if framework is FrontendFramework.REACT:
        answers["auth_ui"] = _confirm(
            f"Include auth pages (login/register/dashboard){suffix}?", False
        )
    return answers


def ask_backend_options(framework: BackendFramework, suffix: str = "") -> dict[str, Any]:
    """Database and capability questions for one backend."""
    database = Database(
        _choose(
            f"Choose database{suffix}",
            [d.value for d in Database],
            Database.MONGODB.value,
        )
    )
    answers: dict[str, Any] = {"framework": framework, "database": database}
    if database is Database.MONGODB:
        answers["easy_mongoo"] = _confirm(f"Use Easy-Mongoo{suffix}?", True)
    answers["auth"] = _confirm(f"Include authentication{suffix}?", True)
    answers["logger"] = _confirm(f"Include logging{suffix}?", True)
    answers["rate_limiter"] = _confirm(f"Include rate limiting{suffix}?", False)
    answers["swagger"] = _confirm(f"Include API documentation (Swagger){suffix}?", False)
    return answers


# ---------------------------------------------------------------------------
# Full flow
# ---------------------------------------------------------------------------


def collect_config(project_name: str, ports: DevServerPorts | None = None) -> ProjectConfig:
    """Ask every question for *project_name* and return the validated config."""
    project_type = ProjectType(
        _choose("Select project type", [t.value for t in ProjectType], ProjectType.FRONTEND.value)
    )
    data: dict[str, Any] = {
        "project_name": project_name,
        "project_type": project_type,
        "ports": ports or DevServerPorts(),
    }

    if project_type is ProjectType.FRONTEND:
        framework = FrontendFramework(
            _choose("Choose framework", [f.value for f in FrontendFramework], "react")
        )
        data["frontend"] = ask_frontend_options(framework)

    elif project_type is ProjectType.BACKEND:
        framework = BackendFramework(
            _choose("Choose backend", [f.value for f in BackendFramework], "express")
        )
        data["backend"] = ask_backend_options(framework)

    else:
        frontend = FrontendFramework(
            _choose("Choose frontend", [f.value for f in FrontendFramework], "react")
        )
        backend = BackendFramework(
            _choose("Choose backend", [f.value for f in BackendFramework], "express")
        )
        data["auto_connect"] = _confirm("Auto-connect frontend & backend?", True)
        data["frontend"] = ask_frontend_options(frontend, " for frontend")
        data["backend"] = ask_backend_options(backend, " in backend")

    data["install_deps"] = _confirm("Install dependencies after project creation?", True)
    return ProjectConfig.model_validate(data)
