"""create-zenuxs-app settings.

CLI-level configuration that is independent of any single project: where
projects are written, which package manager installs their dependencies, and
which local ports the generated dev servers use.  Pydantic v2 models so the
values are validated at construction time and can be overridden from
environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class DevServerPorts(BaseModel):
    """Local ports of the generated dev servers.

    The frontend port is written into the Vite/Next dev configuration and is
    the origin the backend trusts after auto-connect.  The backend port is
    written into the backend ``.env`` files and the frontend API URL.
    """

    model_config = ConfigDict(frozen=True)

    frontend: int = Field(default=3000, ge=1, le=65535)
    backend: int = Field(default=5000, ge=1, le=65535)

    @model_validator(mode="after")
    def _distinct_ports(self) -> "DevServerPorts":
        if self.frontend == self.backend:
            raise ValueError(
                f"frontend and backend dev servers cannot share port {self.frontend}"
            )
        return self

    @property
    def frontend_origin(self) -> str:
        """Origin of the frontend dev server (e.g. ``http://localhost:3000``)."""
        return f"http://localhost:{self.frontend}"

    @property
    def backend_api_url(self) -> str:
        """Base URL of the backend API (e.g. ``http://localhost:5000/api``)."""
        return f"http://localhost:{self.backend}/api"

    def as_dict(self) -> dict[str, int]:
        """Return a plain ``{service: port}`` mapping."""
        return {"frontend": self.frontend, "backend": self.backend}


class Settings(BaseModel):
    """Global CLI settings.

    Created once by the CLI entry point and handed to the generator and the
    installer.
    """

    output_dir: Path = Field(default=Path("."))
    package_manager: str = Field(default="npm", min_length=1)
    ports: DevServerPorts = Field(default_factory=DevServerPorts)

    @classmethod
    def from_env(cls) -> "Settings":
        """Build ``Settings`` from environment variables.

        Recognised variables (all optional):
            ZENUXS_OUTPUT_DIR, ZENUXS_PACKAGE_MANAGER,
            ZENUXS_FRONTEND_PORT, ZENUXS_BACKEND_PORT.
        """
        port_kwargs: dict[str, Any] = {}
        if os.environ.get("ZENUXS_FRONTEND_PORT"):
            port_kwargs["frontend"] = os.environ["ZENUXS_FRONTEND_PORT"]
        if os.environ.get("ZENUXS_BACKEND_PORT"):
            port_kwargs["backend"] = os.environ["ZENUXS_BACKEND_PORT"]

        return cls(
            output_dir=Path(os.environ.get("ZENUXS_OUTPUT_DIR", ".")),
            package_manager=os.environ.get("ZENUXS_PACKAGE_MANAGER", "npm"),
            ports=DevServerPorts(**port_kwargs),
        )
