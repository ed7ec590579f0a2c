"""Shared utility functions for create-zenuxs-app.

Provides async command execution, project-name validation and
normalisation, and Rich-based console output.  Every name helper is pure so
the renderers can call it freely without changing their output.
"""

from __future__ import annotations

import asyncio
import re

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

console = Console()
err_console = Console(stderr=True)

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: list[str],
    cwd: str | None = None,
    capture: bool = True,
) -> tuple[int, str, str]:
    """Run a command asynchronously and wait for it to exit.

    Args:
        cmd: Program and arguments.
        cwd: Working directory for the child process.  The parent's own
            working directory is never changed.
        capture: Whether to capture stdout/stderr (if ``False`` they inherit
            the parent's streams, so the user sees native output).

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  If *capture* is ``False``
        the stdout/stderr strings will be empty.

    Raises:
        FileNotFoundError: If the program does not exist.
    """
    stdout_pipe = asyncio.subprocess.PIPE if capture else None
    stderr_pipe = asyncio.subprocess.PIPE if capture else None

    process = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=stdout_pipe,
        stderr=stderr_pipe,
        cwd=cwd,
    )
    stdout_bytes, stderr_bytes = await process.communicate()

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


# ---------------------------------------------------------------------------
# Project-name helpers
# ---------------------------------------------------------------------------

_RESERVED_CHARS = set('<>:"|?*')
_RESERVED_NAMES = {
    "CON", "PRN", "AUX", "NUL",
    *(f"COM{i}" for i in range(1, 10)),
    *(f"LPT{i}" for i in range(1, 10)),
}


def validate_project_name(name: str) -> str:
    """Return *name* stripped, or raise ``ValueError`` if it is not a safe
    single directory name.

    Rejects empty names, ``.``/``..``, path separators, characters reserved
    on Windows or macOS, control characters, trailing dots/spaces and
    Windows device names.

    Examples::

        validate_project_name("  my-app ")    -> "my-app"
        validate_project_name("../escape")    -> ValueError
    """
    stripped = name.strip()
    if not stripped:
        raise ValueError("Project name must not be empty")
    if stripped in (".", ".."):
        raise ValueError(f"Project name cannot be {stripped!r}")
    if "/" in stripped or "\\" in stripped:
        raise ValueError(f"Project name must not contain path separators: {stripped!r}")
    bad = sorted({ch for ch in stripped if ch in _RESERVED_CHARS or ord(ch) < 32})
    if bad:
        raise ValueError(
            f"Project name contains reserved characters {''.join(bad)!r}: {stripped!r}"
        )
    if stripped.endswith("."):
        raise ValueError(f"Project name must not end with a dot: {stripped!r}")
    if stripped.split(".")[0].upper() in _RESERVED_NAMES:
        raise ValueError(f"Project name is a reserved device name: {stripped!r}")
    return stripped


def normalize_identifier(name: str) -> str:
    """Convert a project name into the identifier used for package and
    database names.

    Lowercases the input and replaces each run of whitespace with a single
    underscore.

    Examples::

        normalize_identifier("My Shop")        -> "my_shop"
        normalize_identifier("demo-backend")   -> "demo-backend"
    """
    return re.sub(r"\s+", "_", name.strip()).lower()


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_banner(version: str) -> None:
    """Print the CLI banner."""
    console.print()
    console.print(f"[bold cyan]Zenuxs CLI v{version}[/bold cyan]")
    console.print("[dim]Creating your project...[/dim]")
    console.print()


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message to stderr."""
    err_console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")


def create_progress() -> Progress:
    """Create a Rich progress spinner for the generation steps.

    Returns:
        A ``Progress`` instance suitable for use as a context manager.
    """
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )
