"""Exceptions raised while rendering or writing a project."""

from __future__ import annotations


class ScaffoldError(Exception):
    """Base class for every scaffolding failure."""


class UnsupportedFrameworkError(ScaffoldError):
    """Raised when no renderer is registered for a framework.

    Validated configurations never reach this; it signals a programming
    error in the dispatch table.
    """

    def __init__(self, side: str, framework: object) -> None:
        self.side = side
        self.framework = framework
        super().__init__(f"No {side} renderer registered for framework {framework!r}")


class DuplicateFileError(ScaffoldError):
    """Raised when two renderers contribute the same output path."""


class UnsafePathError(ScaffoldError):
    """Raised when an output path would be written outside its project root."""


class WiringError(ScaffoldError):
    """Raised when the full-stack wiring pass cannot find its target."""
