"""Project scaffolding: configuration, renderers, composition and output."""

from .errors import (
    DuplicateFileError,
    ScaffoldError,
    UnsafePathError,
    UnsupportedFrameworkError,
    WiringError,
)
from .generator import ProjectGenerator
from .materializer import materialize
from .models import (
    BackendFramework,
    BackendOptions,
    Database,
    FrontendFramework,
    FrontendOptions,
    PackageManifest,
    ProjectConfig,
    ProjectType,
    TemplateFile,
    TemplateOutput,
)
from .templates import TemplateRenderer

__all__ = [
    "BackendFramework",
    "BackendOptions",
    "Database",
    "DuplicateFileError",
    "FrontendFramework",
    "FrontendOptions",
    "PackageManifest",
    "ProjectConfig",
    "ProjectGenerator",
    "ProjectType",
    "ScaffoldError",
    "TemplateFile",
    "TemplateOutput",
    "TemplateRenderer",
    "UnsafePathError",
    "UnsupportedFrameworkError",
    "WiringError",
    "materialize",
]
