"""Tests for the Express and Fastify renderers.

Covers:
- The reference Express project (manifest and file list)
- Database variants
- Feature-flag independence
- Fastify manifest, logger switch and plugin registration
- Determinism
"""

from __future__ import annotations

import itertools
import json

import pytest

from zenuxs.scaffolder.backend import SERVER_ENTRY, backend_context, render_express, render_fastify

pytestmark = pytest.mark.unit

FEATURE_FLAGS = ("auth", "logger", "rate_limiter", "swagger")

# Files owned by exactly one capability.
EXPRESS_FEATURE_FILES = {
    "auth": {
        "src/models/User.js",
        "src/controllers/auth.controller.js",
        "src/middlewares/auth.middleware.js",
        "src/routes/auth.routes.js",
        "src/validators/auth.validators.js",
    },
    "logger": {"src/utils/logger.js", "logs/.gitkeep"},
    "rate_limiter": {"src/middlewares/rateLimiter.js"},
    "swagger": {"src/config/swagger.js"},
}

FASTIFY_FEATURE_FILES = {
    "auth": {"src/plugins/auth.js", "src/models/user.store.js", "src/routes/auth.routes.js"},
}


def _manifest(output) -> dict:
    return json.loads(output.get("package.json").content)


def _all_dependencies(output) -> set[str]:
    manifest = _manifest(output)
    return set(manifest["dependencies"]) | set(manifest["devDependencies"])


# ---------------------------------------------------------------------------
# Express
# ---------------------------------------------------------------------------


class TestExpressReferenceProject:
    @pytest.fixture
    def output(self, renderer, demo_express_config):
        return render_express(demo_express_config, renderer)

    def test_manifest_dependencies(self, output):
        dependencies = set(_manifest(output)["dependencies"])
        assert dependencies == {
            "express",
            "cors",
            "dotenv",
            "helmet",
            "compression",
            "morgan",
            "easy-mongoo",
            "bcrypt",
            "jsonwebtoken",
            "express-validator",
            "winston",
        }

    def test_manifest_metadata(self, output):
        manifest = _manifest(output)
        assert manifest["name"] == "demo"
        assert manifest["type"] == "module"
        assert manifest["scripts"]["dev"] == "nodemon server.js"
        assert set(manifest["devDependencies"]) == {"nodemon", "jest", "supertest"}

    def test_expected_files(self, output):
        for path in (
            "server.js",
            "package.json",
            ".env",
            ".env.example",
            ".gitignore",
            "src/config/database.js",
            "src/middlewares/errorHandler.js",
            "src/middlewares/auth.middleware.js",
            "src/routes/auth.routes.js",
            "src/routes/example.routes.js",
            "src/controllers/example.controller.js",
            "src/validators/auth.validators.js",
            "src/utils/apiResponse.js",
            "src/utils/validation.js",
            "src/models/User.js",
            "src/controllers/auth.controller.js",
            "src/utils/logger.js",
            "logs/.gitkeep",
        ):
            assert path in output, path

    def test_absent_optional_files(self, output):
        assert "src/middlewares/rateLimiter.js" not in output
        assert not any("swagger" in path for path in output.paths())
        assert "swagger" not in output.get(SERVER_ENTRY).content

    def test_server_wiring(self, output):
        server = output.get(SERVER_ENTRY).content
        assert "import authRoutes from './src/routes/auth.routes.js'" in server
        assert "app.use('/api/auth', authRoutes)" in server
        assert "import logger from './src/utils/logger.js'" in server
        assert "rateLimiter" not in server
        assert "app.use(cors())" in server
        assert "const PORT = process.env.PORT || 5000" in server

    def test_server_records_cors_setting(self, output):
        server = output.get(SERVER_ENTRY)
        assert server.template == "backend/express/server.js.j2"
        assert server.context["cors_origin"] is None

    def test_env_files(self, output):
        env = output.get(".env").content
        assert env == output.get(".env.example").content
        assert "PORT=5000" in env
        assert "MONGODB_URI=mongodb://localhost:27017/demo" in env
        assert "JWT_SECRET=" in env
        assert "JWT_REFRESH_SECRET=" in env
        assert "LOG_LEVEL=info" in env
        assert "RATE_LIMIT_MAX" not in env

    def test_error_handler_uses_logger(self, output):
        assert "logger.error" in output.get("src/middlewares/errorHandler.js").content

    def test_protected_example_routes(self, output):
        routes = output.get("src/routes/example.routes.js").content
        assert "authenticateToken" in routes

    def test_gitignore_ignores_logs(self, output):
        assert "logs/*.log" in output.get(".gitignore").content


class TestExpressVariants:
    def test_without_auth(self, renderer, make_backend_config):
        output = render_express(make_backend_config(auth=False), renderer)
        server = output.get(SERVER_ENTRY).content
        assert "authRoutes" not in server
        assert "authenticateToken" not in output.get("src/routes/example.routes.js").content
        assert not {"bcrypt", "jsonwebtoken"} & _all_dependencies(output)
        assert "src/models/User.js" not in output
        assert "src/utils/validation.js" in output
        assert "express-validator" in _manifest(output)["dependencies"]
        assert "validateRequest" in output.get("src/routes/example.routes.js").content

    def test_without_logger(self, renderer, make_backend_config):
        output = render_express(make_backend_config(logger=False), renderer)
        assert "src/utils/logger.js" not in output
        assert "logger.error" not in output.get("src/middlewares/errorHandler.js").content
        assert "logs/*.log" not in output.get(".gitignore").content

    def test_rate_limiter_and_swagger(self, renderer, make_backend_config):
        output = render_express(make_backend_config(rate_limiter=True, swagger=True), renderer)
        server = output.get(SERVER_ENTRY).content
        assert "app.use('/api', rateLimiter)" in server
        assert "app.use('/api-docs', swaggerServe, swaggerSetup)" in server
        assert "RATE_LIMIT_WINDOW=15" in output.get(".env").content
        assert {"express-rate-limit", "swagger-jsdoc", "swagger-ui-express"} <= _all_dependencies(output)

    @pytest.mark.parametrize(
        ("database", "expected"),
        [("mysql", {"mysql2", "sequelize"}), ("postgres", {"pg", "pg-hstore", "sequelize"})],
    )
    def test_sql_databases(self, renderer, make_backend_config, database, expected):
        output = render_express(make_backend_config(database=database), renderer)
        dependencies = _all_dependencies(output)
        assert expected <= dependencies
        assert not {"easy-mongoo", "mongoose"} & dependencies
        assert "DB_HOST=localhost" in output.get(".env").content
        assert "await sequelize.sync()" in output.get("src/config/database.js").content
        assert "sequelize.define(" in output.get("src/models/User.js").content

    def test_custom_backend_port(self, renderer, make_backend_config):
        config = make_backend_config().model_copy(
            update={"ports": make_backend_config().ports.model_copy(update={"backend": 8080})}
        )
        output = render_express(config, renderer)
        assert "process.env.PORT || 8080" in output.get(SERVER_ENTRY).content
        assert "PORT=8080" in output.get(".env").content


# ---------------------------------------------------------------------------
# Fastify
# ---------------------------------------------------------------------------


class TestFastify:
    @pytest.fixture
    def output(self, renderer, make_backend_config):
        return render_fastify(make_backend_config("api", framework="fastify"), renderer)

    def test_manifest(self, output):
        manifest = _manifest(output)
        assert {
            "fastify",
            "@fastify/cors",
            "@fastify/helmet",
            "@fastify/env",
            "@fastify/compress",
            "@fastify/mongodb",
            "@fastify/jwt",
            "bcrypt",
        } <= set(manifest["dependencies"])
        assert "pino-pretty" in manifest["devDependencies"]

    def test_files(self, output):
        assert output.paths()[:2] == ["server.js", "package.json"]
        for path in ("src/plugins/database.js", "src/plugins/auth.js", "src/routes/auth.routes.js"):
            assert path in output

    def test_server(self, output):
        server = output.get(SERVER_ENTRY).content
        assert "await fastify.register(databasePlugin)" in server
        assert "await fastify.register(authRoutes, { prefix: '/api/auth' })" in server
        assert "await fastify.register(cors, { origin: '*' })" in server
        assert "pino-pretty" in server

    def test_logger_disabled(self, renderer, make_backend_config):
        output = render_fastify(
            make_backend_config("api", framework="fastify", logger=False), renderer
        )
        assert "logger: false" in output.get(SERVER_ENTRY).content
        assert "pino-pretty" not in _all_dependencies(output)

    def test_rate_limit_and_swagger(self, renderer, make_backend_config):
        output = render_fastify(
            make_backend_config("api", framework="fastify", rate_limiter=True, swagger=True),
            renderer,
        )
        server = output.get(SERVER_ENTRY).content
        assert "import rateLimit from '@fastify/rate-limit'" in server
        assert "await fastify.register(swaggerUi, { routePrefix: '/api-docs' })" in server


# ---------------------------------------------------------------------------
# Cross-cutting properties
# ---------------------------------------------------------------------------


def _flag_combinations():
    return [dict(zip(FEATURE_FLAGS, values)) for values in itertools.product([False, True], repeat=4)]


class TestFeatureFlagIndependence:
    @pytest.mark.parametrize("render, owned", [
        (render_express, EXPRESS_FEATURE_FILES),
        (render_fastify, FASTIFY_FEATURE_FILES),
    ])
    def test_toggling_a_flag_leaves_other_features_files_alone(
        self, renderer, make_backend_config, render, owned
    ):
        framework = "express" if render is render_express else "fastify"
        for flags in _flag_combinations():
            base = render(make_backend_config(framework=framework, **flags), renderer)
            for toggled in FEATURE_FLAGS:
                other = render(
                    make_backend_config(
                        framework=framework, **{**flags, toggled: not flags[toggled]}
                    ),
                    renderer,
                )
                for feature, paths in owned.items():
                    if feature == toggled:
                        continue
                    for path in paths:
                        assert base.get(path) == other.get(path), (toggled, path)

    def test_feature_files_present_iff_flag_set(self, renderer, make_backend_config):
        for flags in _flag_combinations():
            output = render_express(make_backend_config(**flags), renderer)
            for feature, paths in EXPRESS_FEATURE_FILES.items():
                for path in paths:
                    assert (path in output) is flags[feature]


class TestDeterminism:
    @pytest.mark.parametrize("framework", ["express", "fastify"])
    @pytest.mark.parametrize("database", ["mongodb", "mysql", "postgres"])
    def test_same_config_same_output(self, renderer, make_backend_config, framework, database):
        config = make_backend_config(
            framework=framework, database=database, rate_limiter=True, swagger=True
        )
        render = render_express if framework == "express" else render_fastify
        first = render(config, renderer)
        second = render(config, renderer)
        assert first == second
        assert [f.content for f in first] == [f.content for f in second]


def test_backend_context_requires_backend(make_frontend_config):
    with pytest.raises(ValueError):
        backend_context(make_frontend_config())
