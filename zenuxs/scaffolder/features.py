"""Feature sub-renderers for the backend templates.

Each optional capability (auth, logging, rate limiting, API docs) and each
database driver is rendered by its own small function that returns a
``FeatureBundle``: the files it owns, the packages it needs, the lines it
splices into the server entry point and the variables it adds to ``.env``.
The framework renderers in ``backend.py`` fold the bundles together, so
turning one flag on or off never touches files owned by another.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from .models import BackendOptions, Database, FeatureBundle, TemplateFile
from .templates import TemplateRenderer

FeatureRenderer = Callable[[TemplateRenderer, dict[str, Any]], FeatureBundle]

DATABASE_LABELS: dict[str, str] = {
    Database.MONGODB.value: "MongoDB",
    Database.MYSQL.value: "MySQL",
    Database.POSTGRES.value: "PostgreSQL",
}

_SQL_DEFAULTS: dict[str, tuple[int, str]] = {
    Database.MYSQL.value: (3306, "root"),
    Database.POSTGRES.value: (5432, "postgres"),
}


# ---------------------------------------------------------------------------
# Express
# ---------------------------------------------------------------------------


def express_database(renderer: TemplateRenderer, ctx: dict[str, Any]) -> FeatureBundle:
    """Driver packages, ``src/config/database.js`` and connection variables."""
    database = ctx["database"]
    bundle = FeatureBundle(
        files=[
            renderer.render_file(
                "backend/express/database.js.j2", "src/config/database.js", ctx
            )
        ],
        env=["", "# Database"],
    )

    if database == Database.MONGODB.value:
        if ctx["easy_mongoo"]:
            bundle.dependencies["easy-mongoo"] = "^1.0.0"
        else:
            bundle.dependencies["mongoose"] = "^7.0.0"
        bundle.env.append(f"MONGODB_URI=mongodb://localhost:27017/{ctx['identifier']}")
        return bundle

    if database == Database.MYSQL.value:
        bundle.dependencies.update({"mysql2": "^3.0.0", "sequelize": "^6.0.0"})
    else:
        bundle.dependencies.update({"pg": "^8.0.0", "pg-hstore": "^2.3.0", "sequelize": "^6.0.0"})

    port, user = _SQL_DEFAULTS[database]
    bundle.env.extend([
        "DB_HOST=localhost",
        f"DB_PORT={port}",
        f"DB_NAME={ctx['identifier']}",
        f"DB_USER={user}",
        "DB_PASSWORD=",
    ])
    return bundle


def express_auth(renderer: TemplateRenderer, ctx: dict[str, Any]) -> FeatureBundle:
    """JWT auth backed by a ``User`` model on the configured database.

    Access and refresh tokens are both issued; the latest refresh token is
    stored on the user so ``/refresh-token`` rotates it and ``/logout``
    revokes it.
    """
    return FeatureBundle(
        files=[
            renderer.render_file("backend/express/User.js.j2", "src/models/User.js", ctx),
            renderer.render_file(
                "backend/express/auth.controller.js.j2", "src/controllers/auth.controller.js", ctx
            ),
            renderer.render_file(
                "backend/express/auth.middleware.js.j2", "src/middlewares/auth.middleware.js", ctx
            ),
            renderer.render_file(
                "backend/express/auth.routes.js.j2", "src/routes/auth.routes.js", ctx
            ),
            renderer.render_file(
                "backend/express/auth.validators.js.j2", "src/validators/auth.validators.js", ctx
            ),
        ],
        dependencies={
            "bcrypt": "^5.0.0",
            "jsonwebtoken": "^9.0.0",
        },
        imports=["import authRoutes from './src/routes/auth.routes.js'"],
        routes=["app.use('/api/auth', authRoutes)"],
        env=[
            "",
            "# JWT",
            "JWT_SECRET=change_this_jwt_secret_in_production",
            "JWT_EXPIRES_IN=15m",
            "JWT_REFRESH_SECRET=change_this_refresh_secret_too",
            "JWT_REFRESH_EXPIRES_IN=7d",
            "BCRYPT_SALT_ROUNDS=12",
        ],
    )


def express_logger(renderer: TemplateRenderer, ctx: dict[str, Any]) -> FeatureBundle:
    return FeatureBundle(
        files=[
            renderer.render_file("backend/express/logger.js.j2", "src/utils/logger.js", ctx),
            _keep_file("logs/.gitkeep"),
        ],
        dependencies={"winston": "^3.0.0"},
        imports=["import logger from './src/utils/logger.js'"],
        startup=["logger.info(`Starting server in ${process.env.NODE_ENV} mode`)"],
        env=["", "# Logging", "LOG_LEVEL=info"],
    )


def express_rate_limiter(renderer: TemplateRenderer, ctx: dict[str, Any]) -> FeatureBundle:
    return FeatureBundle(
        files=[
            renderer.render_file(
                "backend/express/rateLimiter.js.j2", "src/middlewares/rateLimiter.js", ctx
            )
        ],
        dependencies={"express-rate-limit": "^6.0.0"},
        imports=["import rateLimiter from './src/middlewares/rateLimiter.js'"],
        setup=["app.use('/api', rateLimiter)"],
        env=["", "# Rate limiting", "RATE_LIMIT_WINDOW=15", "RATE_LIMIT_MAX=100"],
    )


def express_swagger(renderer: TemplateRenderer, ctx: dict[str, Any]) -> FeatureBundle:
    return FeatureBundle(
        files=[renderer.render_file("backend/express/swagger.js.j2", "src/config/swagger.js", ctx)],
        dependencies={"swagger-jsdoc": "^6.0.0", "swagger-ui-express": "^5.0.0"},
        imports=["import { swaggerServe, swaggerSetup } from './src/config/swagger.js'"],
        routes=["app.use('/api-docs', swaggerServe, swaggerSetup)"],
    )


EXPRESS_FEATURES: list[tuple[str, FeatureRenderer]] = [
    ("auth", express_auth),
    ("logger", express_logger),
    ("rate_limiter", express_rate_limiter),
    ("swagger", express_swagger),
]


# ---------------------------------------------------------------------------
# Fastify
# ---------------------------------------------------------------------------


def fastify_database(renderer: TemplateRenderer, ctx: dict[str, Any]) -> FeatureBundle:
    """Database plugin registration and its connection string."""
    database = ctx["database"]
    identifier = ctx["identifier"]
    bundle = FeatureBundle(
        files=[
            renderer.render_file(
                "backend/fastify/database.js.j2", "src/plugins/database.js", ctx
            )
        ],
        env=["", "# Database"],
    )

    if database == Database.MONGODB.value:
        bundle.dependencies["@fastify/mongodb"] = "^8.0.0"
        bundle.env.append(f"MONGODB_URI=mongodb://localhost:27017/{identifier}")
    elif database == Database.MYSQL.value:
        bundle.dependencies["@fastify/mysql"] = "^4.0.0"
        port, user = _SQL_DEFAULTS[database]
        bundle.env.append(f"DATABASE_URL=mysql://{user}@localhost:{port}/{identifier}")
    else:
        bundle.dependencies.update({"@fastify/postgres": "^5.0.0", "pg": "^8.0.0"})
        port, user = _SQL_DEFAULTS[database]
        bundle.env.append(f"DATABASE_URL=postgres://{user}@localhost:{port}/{identifier}")
    return bundle


def fastify_auth(renderer: TemplateRenderer, ctx: dict[str, Any]) -> FeatureBundle:
    """JWT plugin, auth routes and a user store on the registered database plugin."""
    return FeatureBundle(
        files=[
            renderer.render_file("backend/fastify/auth.plugin.js.j2", "src/plugins/auth.js", ctx),
            renderer.render_file(
                "backend/fastify/user.store.js.j2", "src/models/user.store.js", ctx
            ),
            renderer.render_file(
                "backend/fastify/auth.routes.js.j2", "src/routes/auth.routes.js", ctx
            ),
        ],
        dependencies={"@fastify/jwt": "^7.0.0", "bcrypt": "^5.0.0"},
        imports=[
            "import authPlugin from './src/plugins/auth.js'",
            "import authRoutes from './src/routes/auth.routes.js'",
        ],
        setup=["await fastify.register(authPlugin)"],
        routes=["await fastify.register(authRoutes, { prefix: '/api/auth' })"],
        env=[
            "",
            "# JWT",
            "JWT_SECRET=change_this_jwt_secret_in_production",
            "JWT_EXPIRES_IN=15m",
            "JWT_REFRESH_EXPIRES_IN=7d",
            "BCRYPT_SALT_ROUNDS=12",
        ],
    )


def fastify_logger(renderer: TemplateRenderer, ctx: dict[str, Any]) -> FeatureBundle:
    # Fastify ships pino; the flag only switches it on in server.js.
    return FeatureBundle(
        dev_dependencies={"pino-pretty": "^10.0.0"},
        env=["", "# Logging", "LOG_LEVEL=info"],
    )


def fastify_rate_limiter(renderer: TemplateRenderer, ctx: dict[str, Any]) -> FeatureBundle:
    return FeatureBundle(
        dependencies={"@fastify/rate-limit": "^8.0.0"},
        imports=["import rateLimit from '@fastify/rate-limit'"],
        setup=[
            "await fastify.register(rateLimit, {\n"
            "  max: Number(process.env.RATE_LIMIT_MAX || 100),\n"
            "  timeWindow: `${process.env.RATE_LIMIT_WINDOW || 15} minutes`\n"
            "})"
        ],
        env=["", "# Rate limiting", "RATE_LIMIT_WINDOW=15", "RATE_LIMIT_MAX=100"],
    )


def fastify_swagger(renderer: TemplateRenderer, ctx: dict[str, Any]) -> FeatureBundle:
    title = f"{ctx['project_name']} API".replace("'", "\\'")
    return FeatureBundle(
        dependencies={"@fastify/swagger": "^8.0.0", "@fastify/swagger-ui": "^1.0.0"},
        imports=[
            "import swagger from '@fastify/swagger'",
            "import swaggerUi from '@fastify/swagger-ui'",
        ],
        setup=[
            "await fastify.register(swagger, {\n"
            f"  openapi: {{ info: {{ title: '{title}', version: '1.0.0' }} }}\n"
            "})",
            "await fastify.register(swaggerUi, { routePrefix: '/api-docs' })",
        ],
    )


FASTIFY_FEATURES: list[tuple[str, FeatureRenderer]] = [
    ("auth", fastify_auth),
    ("logger", fastify_logger),
    ("rate_limiter", fastify_rate_limiter),
    ("swagger", fastify_swagger),
]


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------


def collect_features(
    options: BackendOptions,
    table: list[tuple[str, FeatureRenderer]],
    renderer: TemplateRenderer,
    ctx: dict[str, Any],
) -> FeatureBundle:
    """Render every enabled capability in *table* and fold the bundles."""
    combined = FeatureBundle()
    for flag, render_feature in table:
        if getattr(options, flag):
            combined.extend(render_feature(renderer, ctx))
    return combined


def _keep_file(path: str) -> TemplateFile:
    """Empty placeholder so an otherwise empty directory is created."""
    return TemplateFile(path=path, content="")
