"""Shared pytest fixtures for the create-zenuxs-app test suite.

Provides reusable fixtures for:
- A template renderer over the bundled templates
- Configuration factories for each project type
- The reference Express backend and the auto-connected full-stack project
- A patched ``run_command`` so no package manager is ever executed
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest

from zenuxs.scaffolder.models import ProjectConfig
from zenuxs.scaffolder.templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def renderer() -> TemplateRenderer:
    """Renderer over the templates shipped with the package."""
    return TemplateRenderer()


# ---------------------------------------------------------------------------
# Configuration factories
# ---------------------------------------------------------------------------

@pytest.fixture
def make_frontend_config() -> Callable[..., ProjectConfig]:
    """Build a frontend ``ProjectConfig``; keyword args override options."""

    def _make(name: str = "web-app", **options: Any) -> ProjectConfig:
        frontend = {"framework": "react", **options}
        return ProjectConfig.model_validate(
            {"project_name": name, "project_type": "frontend", "frontend": frontend}
        )

    return _make


@pytest.fixture
def make_backend_config() -> Callable[..., ProjectConfig]:
    """Build a backend ``ProjectConfig``; keyword args override options."""

    def _make(name: str = "api", **options: Any) -> ProjectConfig:
        backend = {"framework": "express", **options}
        return ProjectConfig.model_validate(
            {"project_name": name, "project_type": "backend", "backend": backend}
        )

    return _make


@pytest.fixture
def make_fullstack_config() -> Callable[..., ProjectConfig]:
    """Build a full-stack ``ProjectConfig``.

    ``frontend`` and ``backend`` are option dicts merged over React and
    Express defaults; other keyword args are top-level fields.
    """

    def _make(
        name: str = "shop",
        frontend: dict[str, Any] | None = None,
        backend: dict[str, Any] | None = None,
        **fields: Any,
    ) -> ProjectConfig:
        return ProjectConfig.model_validate(
            {
                "project_name": name,
                "project_type": "fullstack",
                "frontend": {"framework": "react", **(frontend or {})},
                "backend": {"framework": "express", **(backend or {})},
                **fields,
            }
        )

    return _make


@pytest.fixture
def demo_express_config(make_backend_config) -> ProjectConfig:
    """The reference Express backend: MongoDB + Easy-Mongoo, auth and logging."""
    return make_backend_config(
        "demo",
        database="mongodb",
        easy_mongoo=True,
        auth=True,
        logger=True,
        rate_limiter=False,
        swagger=False,
    )


@pytest.fixture
def connected_fullstack_config(make_fullstack_config) -> ProjectConfig:
    """React + Express full-stack project with auto-connect enabled."""
    return make_fullstack_config("shop", auto_connect=True)


# ---------------------------------------------------------------------------
# Subprocess isolation
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_run_command():
    """Patch the generator's ``run_command`` to succeed without running anything."""
    with patch(
        "zenuxs.scaffolder.generator.run_command",
        new_callable=AsyncMock,
        return_value=(0, "", ""),
    ) as mocked:
        yield mocked


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Parent directory for generated projects (auto-cleanup)."""
    target = tmp_path / "out"
    target.mkdir()
    return target
