"""Command-line entry point.

Usage::

    create-zenuxs-app my-app
    create-zenuxs-app my-app --answers answers.yaml --no-install
    python -m zenuxs my-app -o ./projects
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

import yaml
from jinja2 import TemplateError
from pydantic import ValidationError

from zenuxs import __version__
from zenuxs.config import Settings
from zenuxs.prompts import collect_config
from zenuxs.scaffolder.errors import ScaffoldError
from zenuxs.scaffolder.generator import BACKEND_LABELS, FRONTEND_LABELS, ProjectGenerator
from zenuxs.scaffolder.models import ProjectConfig, ProjectType
from zenuxs.utils import (
    console,
    create_progress,
    print_banner,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
    validate_project_name,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="create-zenuxs-app",
        description="Scaffold a React, Next.js, Express or Fastify project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  create-zenuxs-app my-app\n"
            "  create-zenuxs-app my-app -o ./projects --no-install\n"
            "  create-zenuxs-app my-app --answers answers.yaml\n"
        ),
    )
    parser.add_argument("project_name", nargs="?", help="Name of the project directory")
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Parent directory for the project (default: $ZENUXS_OUTPUT_DIR or .)",
    )
    parser.add_argument(
        "--answers",
        default=None,
        help="JSON or YAML file with the answers; skips the interactive prompts",
    )
    parser.add_argument(
        "--no-install",
        action="store_true",
        help="Do not install dependencies after generation",
    )
    parser.add_argument(
        "--package-manager",
        default=None,
        help="Package manager used to install dependencies (default: npm)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


async def scaffold(config: ProjectConfig, output_dir: Path, package_manager: str) -> Path:
    """Generate the project, then install its dependencies if requested."""
    generator = ProjectGenerator(config)

    with create_progress() as progress:
        progress.add_task("Creating project structure...", total=None)
        project_root = await generator.generate(output_dir)
    print_success("Project structure created!")

    if config.install_deps:
        console.print("[dim]Installing dependencies...[/dim]")
        if await generator.install_dependencies(project_root, package_manager):
            print_success("Dependencies installed!")

    return project_root


def show_next_steps(config: ProjectConfig, project_root: Path) -> None:
    summary = {"Project": config.project_name, "Type": config.project_type.value}
    if config.frontend is not None:
        summary["Frontend"] = FRONTEND_LABELS[config.frontend.framework]
    if config.backend is not None:
        summary["Backend"] = BACKEND_LABELS[config.backend.framework]
        summary["Database"] = config.backend.database.value
    if config.project_type is ProjectType.FULLSTACK:
        summary["Auto-connect"] = "yes" if config.auto_connect else "no"
    summary["Location"] = str(project_root)
    print_summary_table(summary, title="Project created successfully!")

    console.print("[bold cyan]Getting started:[/bold cyan]")
    console.print(f"  cd {config.project_name}")
    if config.project_type is ProjectType.FULLSTACK:
        console.print("  cd frontend && npm run dev")
        console.print("  cd backend && npm run dev")
    else:
        console.print("  npm run dev")

    console.print()
    console.print("[bold cyan]Documentation:[/bold cyan]")
    console.print("  Zenuxs Accounts: https://zenuxs.in")
    console.print("  Easy-Mongoo: https://easy-mongoo.zenuxs.in")
    console.print("  HMAX Security: https://hmax.zenuxs.in")


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``create-zenuxs-app``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.project_name:
        print_error("Please provide a project name")
        parser.print_usage(sys.stderr)
        sys.exit(1)

    print_banner(__version__)

    try:
        settings = Settings.from_env()
        output_dir = Path(args.output) if args.output else settings.output_dir
        package_manager = args.package_manager or settings.package_manager

        if args.answers:
            config = ProjectConfig.load(
                args.answers,
                defaults={"ports": settings.ports.model_dump()},
                project_name=args.project_name,
            )
        else:
            # Reject a bad name before asking any question.
            validate_project_name(args.project_name)
            config = collect_config(args.project_name, settings.ports)
        if args.no_install:
            config = config.model_copy(update={"install_deps": False})

        project_root = asyncio.run(scaffold(config, output_dir, package_manager))
    except ValidationError as exc:
        print_error(f"Invalid configuration:\n{exc}")
        sys.exit(1)
    except (ScaffoldError, OSError, ValueError, yaml.YAMLError, TemplateError) as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)
    except KeyboardInterrupt:
        print_warning("Aborted.")
        sys.exit(1)

    show_next_steps(config, project_root)


if __name__ == "__main__":
    main()
