"""Data models for project scaffolding.

``ProjectConfig`` is the fully-resolved set of choices a project is rendered
from.  ``TemplateFile``/``TemplateOutput`` describe a rendered file tree in
memory, ``PackageManifest`` is the generated ``package.json`` and
``FeatureBundle`` is what one optional capability contributes to a backend.
"""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from zenuxs.config import DevServerPorts
from zenuxs.utils import normalize_identifier, validate_project_name

from .errors import DuplicateFileError, UnsafePathError


# ---------------------------------------------------------------------------
# Enumerated choices
# ---------------------------------------------------------------------------


class ProjectType(str, Enum):
    FRONTEND = "frontend"
    BACKEND = "backend"
    FULLSTACK = "fullstack"


class FrontendFramework(str, Enum):
    REACT = "react"
    NEXT = "next"


class BackendFramework(str, Enum):
    EXPRESS = "express"
    FASTIFY = "fastify"


class Database(str, Enum):
    MONGODB = "mongodb"
    MYSQL = "mysql"
    POSTGRES = "postgres"


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class FrontendOptions(BaseModel):
    """Choices for a frontend project (or the frontend half of a full-stack one)."""

    model_config = ConfigDict(frozen=True)

    framework: FrontendFramework
    typescript: bool = Field(default=True, description="Emit .ts/.tsx sources and tsconfig")
    tailwind: bool = Field(default=True, description="Style with TailwindCSS")
    auth_ui: bool = Field(default=False, description="Login/register/dashboard pages (React only)")

    @model_validator(mode="before")
    @classmethod
    def _resolve_auth_ui(cls, data: Any) -> Any:
        # Auth pages only exist for the React renderer.
        if isinstance(data, dict) and data.get("framework") == FrontendFramework.NEXT:
            return {**data, "auth_ui": False}
        return data


class BackendOptions(BaseModel):
    """Choices for a backend project (or the backend half of a full-stack one)."""

    model_config = ConfigDict(frozen=True)

    framework: BackendFramework
    database: Database = Database.MONGODB
    easy_mongoo: bool = Field(default=True, description="Use Easy-Mongoo instead of Mongoose")
    auth: bool = Field(default=True, description="JWT authentication routes and middleware")
    logger: bool = Field(default=True, description="Structured request/application logging")
    rate_limiter: bool = Field(default=False, description="Per-IP request rate limiting")
    swagger: bool = Field(default=False, description="OpenAPI docs served at /api-docs")

    @model_validator(mode="before")
    @classmethod
    def _resolve_easy_mongoo(cls, data: Any) -> Any:
        if isinstance(data, dict):
            database = data.get("database", Database.MONGODB)
            if database != Database.MONGODB:
                return {**data, "easy_mongoo": False}
        return data


class ProjectConfig(BaseModel):
    """Pydantic model describing the project to scaffold.

    Built once per run (by the prompt flow or from an answers file) and never
    mutated afterwards.  Frontend options are present iff the project type
    includes a frontend, backend options iff it includes a backend.
    """

    model_config = ConfigDict(frozen=True)

    project_name: str = Field(..., description="Display name and directory name")
    project_type: ProjectType
    frontend: FrontendOptions | None = None
    backend: BackendOptions | None = None
    auto_connect: bool = Field(
        default=False,
        description="Wire the frontend to the backend (full-stack only)",
    )
    install_deps: bool = Field(default=True, description="Run the package manager afterwards")
    ports: DevServerPorts = Field(default_factory=DevServerPorts)

    @field_validator("project_name")
    @classmethod
    def _check_project_name(cls, value: str) -> str:
        return validate_project_name(value)

    @model_validator(mode="after")
    def _check_sections(self) -> "ProjectConfig":
        wants_frontend = self.project_type in (ProjectType.FRONTEND, ProjectType.FULLSTACK)
        wants_backend = self.project_type in (ProjectType.BACKEND, ProjectType.FULLSTACK)

        if wants_frontend and self.frontend is None:
            raise ValueError(f"{self.project_type.value} projects require frontend options")
        if not wants_frontend and self.frontend is not None:
            raise ValueError("backend projects must not carry frontend options")
        if wants_backend and self.backend is None:
            raise ValueError(f"{self.project_type.value} projects require backend options")
        if not wants_backend and self.backend is not None:
            raise ValueError("frontend projects must not carry backend options")
        if self.auto_connect and self.project_type is not ProjectType.FULLSTACK:
            raise ValueError("auto_connect is only valid for fullstack projects")
        return self

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def identifier(self) -> str:
        """Package/database identifier derived from the project name."""
        return normalize_identifier(self.project_name)

    def frontend_config(self) -> "ProjectConfig":
        """Stand-alone frontend configuration for the ``frontend/`` sub-tree."""
        if self.frontend is None:
            raise ValueError(f"{self.project_type.value} project has no frontend")
        return ProjectConfig(
            project_name=f"{self.project_name}-frontend",
            project_type=ProjectType.FRONTEND,
            frontend=self.frontend,
            install_deps=self.install_deps,
            ports=self.ports,
        )

    def backend_config(self) -> "ProjectConfig":
        """Stand-alone backend configuration for the ``backend/`` sub-tree."""
        if self.backend is None:
            raise ValueError(f"{self.project_type.value} project has no backend")
        return ProjectConfig(
            project_name=f"{self.project_name}-backend",
            project_type=ProjectType.BACKEND,
            backend=self.backend,
            install_deps=self.install_deps,
            ports=self.ports,
        )

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: str | Path) -> Path:
        """Persist the configuration as a JSON answers file."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2) + "\n", encoding="utf-8")
        return target

    @classmethod
    def load(
        cls,
        path: str | Path,
        defaults: Mapping[str, Any] | None = None,
        **overrides: Any,
    ) -> "ProjectConfig":
        """Load a configuration from a JSON or YAML answers file.

        *defaults* fill keys the file leaves out (e.g. ports from the
        environment); keyword overrides (e.g. ``project_name`` from the
        command line) take precedence over values in the file.
        """
        raw = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Answers file must contain a mapping: {path}")
        return cls.model_validate({**(defaults or {}), **raw, **overrides})


# ---------------------------------------------------------------------------
# Rendered output
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TemplateFile:
    """One file of a rendered project.

    ``path`` is relative and POSIX-style.  ``template``/``context`` record
    how the file was rendered so a later pass can re-render it with a
    different value for one of its named settings.
    """

    path: str
    content: str | bytes
    is_binary: bool = False
    template: str | None = None
    context: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def __post_init__(self) -> None:
        posix = PurePosixPath(self.path.replace("\\", "/"))
        if not posix.parts or posix.is_absolute() or ":" in posix.parts[0]:
            raise UnsafePathError(f"Template paths must be relative: {self.path!r}")
        if ".." in posix.parts:
            raise UnsafePathError(f"Template paths must not contain '..': {self.path!r}")
        object.__setattr__(self, "path", posix.as_posix())
        if isinstance(self.content, bytes):
            object.__setattr__(self, "is_binary", True)


class TemplateOutput:
    """Ordered, path-unique collection of ``TemplateFile`` objects."""

    def __init__(self, files: Iterable[TemplateFile] = ()) -> None:
        self._files: dict[str, TemplateFile] = {}
        for file in files:
            self.add(file)

    def add(self, file: TemplateFile) -> None:
        """Append *file*; a second file at the same path is an error."""
        if file.path in self._files:
            raise DuplicateFileError(f"Path rendered twice: {file.path}")
        self._files[file.path] = file

    def replace(self, file: TemplateFile) -> None:
        """Swap the existing file at ``file.path`` in place."""
        if file.path not in self._files:
            raise KeyError(file.path)
        self._files[file.path] = file

    def merge(self, other: Iterable[TemplateFile]) -> None:
        for file in other:
            self.add(file)

    def get(self, path: str) -> TemplateFile | None:
        return self._files.get(path)

    def paths(self) -> list[str]:
        return list(self._files)

    def nested(self, prefix: str) -> "TemplateOutput":
        """Return a copy with every path moved under *prefix*."""
        prefix = prefix.strip("/")
        return TemplateOutput(
            dataclasses.replace(f, path=f"{prefix}/{f.path}") for f in self
        )

    def __contains__(self, path: object) -> bool:
        return path in self._files

    def __iter__(self) -> Iterator[TemplateFile]:
        return iter(list(self._files.values()))

    def __len__(self) -> int:
        return len(self._files)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TemplateOutput):
            return NotImplemented
        return list(self._files.values()) == list(other._files.values())

    def __repr__(self) -> str:
        return f"TemplateOutput({len(self)} files)"


# ---------------------------------------------------------------------------
# package.json
# ---------------------------------------------------------------------------


class PackageManifest(BaseModel):
    """The generated ``package.json``."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    version: str = "1.0.0"
    private: bool | None = None
    type: str | None = "module"
    scripts: dict[str, str] = Field(default_factory=dict)
    dependencies: dict[str, str] = Field(default_factory=dict)
    dev_dependencies: dict[str, str] = Field(default_factory=dict, alias="devDependencies")

    def add_dependencies(self, packages: Mapping[str, str], *, dev: bool = False) -> None:
        target = self.dev_dependencies if dev else self.dependencies
        target.update(packages)

    def to_json(self) -> str:
        """Serialise with sorted dependency maps and a trailing newline."""
        data = self.model_dump(by_alias=True, exclude_none=True)
        data["dependencies"] = dict(sorted(self.dependencies.items()))
        data["devDependencies"] = dict(sorted(self.dev_dependencies.items()))
        return json.dumps(data, indent=2) + "\n"

    def to_file(self, path: str = "package.json") -> TemplateFile:
        return TemplateFile(path=path, content=self.to_json())


# ---------------------------------------------------------------------------
# Feature bundles
# ---------------------------------------------------------------------------


@dataclass
class FeatureBundle:
    """Everything one optional backend capability contributes.

    ``imports``/``setup``/``routes``/``startup`` are lines spliced into the
    server entry point; ``env`` lines are appended to the ``.env`` files.
    """

    files: list[TemplateFile] = field(default_factory=list)
    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)
    imports: list[str] = field(default_factory=list)
    setup: list[str] = field(default_factory=list)
    routes: list[str] = field(default_factory=list)
    startup: list[str] = field(default_factory=list)
    env: list[str] = field(default_factory=list)

    def extend(self, other: "FeatureBundle") -> None:
        """Fold *other* into this bundle, preserving contribution order."""
        self.files.extend(other.files)
        self.dependencies.update(other.dependencies)
        self.dev_dependencies.update(other.dev_dependencies)
        self.imports.extend(other.imports)
        self.setup.extend(other.setup)
        self.routes.extend(other.routes)
        self.startup.extend(other.startup)
        self.env.extend(other.env)
