"""Backend renderers: Express and Fastify.

Both follow the same shape: build the shared template context, collect the
database bundle and every enabled feature bundle, then render the entry
point, the manifest and the environment files from the merged result.
"""

from __future__ import annotations

from typing import Any

from .features import (
    DATABASE_LABELS,
    EXPRESS_FEATURES,
    FASTIFY_FEATURES,
    collect_features,
    express_database,
    fastify_database,
)
from .models import Database, FeatureBundle, PackageManifest, ProjectConfig, TemplateFile, TemplateOutput
from .templates import TemplateRenderer, gitignore_file, project_context

SERVER_ENTRY = "server.js"

_SEQUELIZE_DIALECTS = {
    Database.MYSQL.value: "mysql",
    Database.POSTGRES.value: "postgres",
}


def backend_context(config: ProjectConfig) -> dict[str, Any]:
    """Template context for a backend project.

    ``cors_origin`` is ``None`` here (permissive CORS); the full-stack
    wiring pass re-renders the entry point with a concrete origin.
    """
    options = config.backend
    if options is None:
        raise ValueError(f"{config.project_type.value} project has no backend options")

    database = options.database.value
    return {
        **project_context(config),
        "port": config.ports.backend,
        "database": database,
        "database_label": DATABASE_LABELS[database],
        "dialect": _SEQUELIZE_DIALECTS.get(database, ""),
        "easy_mongoo": options.easy_mongoo,
        "auth": options.auth,
        "logger": options.logger,
        "rate_limiter": options.rate_limiter,
        "swagger": options.swagger,
        "cors_origin": None,
    }


# ---------------------------------------------------------------------------
# Express
# ---------------------------------------------------------------------------


def render_express(config: ProjectConfig, renderer: TemplateRenderer) -> TemplateOutput:
    """Render an Express REST API."""
    ctx = backend_context(config)
    bundle = express_database(renderer, ctx)
    bundle.extend(collect_features(config.backend, EXPRESS_FEATURES, renderer, ctx))

    manifest = PackageManifest(
        name=config.identifier,
        scripts={
            "start": "node server.js",
            "dev": "nodemon server.js",
            "test": "NODE_ENV=test jest",
        },
        dependencies={
            "express": "^4.18.0",
            "cors": "^2.8.5",
            "dotenv": "^16.0.0",
            "helmet": "^7.0.0",
            "compression": "^1.7.4",
            "morgan": "^1.10.0",
            "express-validator": "^7.0.0",
        },
        devDependencies={
            "nodemon": "^3.0.0",
            "jest": "^29.0.0",
            "supertest": "^6.0.0",
        },
    )

    output = TemplateOutput()
    output.add(_render_server(renderer, "backend/express/server.js.j2", ctx, bundle))
    output.add(_finish_manifest(manifest, bundle))
    output.merge(_env_files(renderer, ctx, bundle))
    for template, path in (
        ("backend/express/errorHandler.js.j2", "src/middlewares/errorHandler.js"),
        ("backend/express/apiResponse.js.j2", "src/utils/apiResponse.js"),
        ("backend/express/validation.js.j2", "src/utils/validation.js"),
        ("backend/express/example.controller.js.j2", "src/controllers/example.controller.js"),
        ("backend/express/example.routes.js.j2", "src/routes/example.routes.js"),
    ):
        output.add(renderer.render_file(template, path, ctx))
    output.merge(bundle.files)
    output.add(gitignore_file(renderer, logs=config.backend.logger))
    return output


# ---------------------------------------------------------------------------
# Fastify
# ---------------------------------------------------------------------------


def render_fastify(config: ProjectConfig, renderer: TemplateRenderer) -> TemplateOutput:
    """Render a Fastify REST API."""
    ctx = backend_context(config)
    bundle = fastify_database(renderer, ctx)
    bundle.extend(collect_features(config.backend, FASTIFY_FEATURES, renderer, ctx))

    manifest = PackageManifest(
        name=config.identifier,
        scripts={
            "start": "node server.js",
            "dev": "NODE_ENV=development nodemon server.js",
        },
        dependencies={
            "fastify": "^4.24.0",
            "@fastify/cors": "^8.4.0",
            "@fastify/helmet": "^11.1.0",
            "@fastify/env": "^4.3.0",
            "@fastify/compress": "^6.5.0",
            "fastify-plugin": "^4.5.0",
        },
        devDependencies={"nodemon": "^3.0.0"},
    )

    output = TemplateOutput()
    output.add(_render_server(renderer, "backend/fastify/server.js.j2", ctx, bundle))
    output.add(_finish_manifest(manifest, bundle))
    output.merge(_env_files(renderer, ctx, bundle))
    output.merge(bundle.files)
    output.add(gitignore_file(renderer))
    return output


# ---------------------------------------------------------------------------
# Shared pieces
# ---------------------------------------------------------------------------


def _render_server(
    renderer: TemplateRenderer,
    template: str,
    ctx: dict[str, Any],
    bundle: FeatureBundle,
) -> TemplateFile:
    server_ctx = {
        **ctx,
        "imports": bundle.imports,
        "setup": bundle.setup,
        "routes": bundle.routes,
        "startup": bundle.startup,
    }
    return renderer.render_file(template, SERVER_ENTRY, server_ctx)


def _finish_manifest(manifest: PackageManifest, bundle: FeatureBundle) -> TemplateFile:
    manifest.add_dependencies(bundle.dependencies)
    manifest.add_dependencies(bundle.dev_dependencies, dev=True)
    return manifest.to_file()


def _env_files(
    renderer: TemplateRenderer, ctx: dict[str, Any], bundle: FeatureBundle
) -> list[TemplateFile]:
    env_ctx = {**ctx, "env": bundle.env}
    content = renderer.render("backend/env.j2", env_ctx)
    return [
        TemplateFile(path=".env", content=content),
        TemplateFile(path=".env.example", content=content),
    ]

