"""Frontend renderers: React (Vite) and Next.js (App Router)."""

from __future__ import annotations

from typing import Any

from .models import PackageManifest, ProjectConfig, TemplateOutput
from .templates import TemplateRenderer, gitignore_file, project_context

# Class names used by the auth pages.  With Tailwind they are utility
# classes; without it they refer to rules in ``src/pages/auth/auth.css``.
AUTH_CLASSES_TAILWIND: dict[str, str] = {
    "page": "min-h-[70vh] flex items-center justify-center px-4",
    "card": "w-full max-w-md bg-white rounded-xl shadow-lg p-8",
    "title": "text-2xl font-bold text-gray-900 text-center",
    "subtitle": "mt-2 text-sm text-gray-600 text-center",
    "form": "mt-6 space-y-4",
    "label": "block text-sm font-medium text-gray-700",
    "input": "mt-1 w-full rounded-lg border border-gray-300 px-3 py-2 focus:outline-none focus:ring-2 focus:ring-blue-500",
    "button": "w-full rounded-lg bg-blue-600 py-2 font-semibold text-white hover:bg-blue-700 disabled:opacity-50",
    "link": "font-medium text-blue-600 hover:underline",
    "footer": "mt-6 text-center text-sm text-gray-600",
    "error": "rounded-lg bg-red-50 px-3 py-2 text-sm text-red-700",
}

AUTH_CLASSES_PLAIN: dict[str, str] = {
    key: f"auth-{key}" for key in AUTH_CLASSES_TAILWIND
}

_AUTH_PAGES = ("Login", "Register", "Dashboard")


def frontend_context(config: ProjectConfig) -> dict[str, Any]:
    options = config.frontend
    if options is None:
        raise ValueError(f"{config.project_type.value} project has no frontend options")
    return {
        **project_context(config),
        "port": config.ports.frontend,
        "typescript": options.typescript,
        "tailwind": options.tailwind,
        "auth_ui": options.auth_ui,
        "ext": "tsx" if options.typescript else "jsx",
    }


def _tailwind_files(
    output: TemplateOutput, renderer: TemplateRenderer, content_globs: list[str]
) -> None:
    output.add(
        renderer.render_file(
            "frontend/shared/tailwind.config.js.j2",
            "tailwind.config.js",
            {"content_globs": content_globs},
        )
    )
    output.add(renderer.render_file("frontend/shared/postcss.config.js.j2", "postcss.config.js", {}))


def _add_styling_packages(manifest: PackageManifest, *, typescript: bool, tailwind: bool) -> None:
    if typescript:
        manifest.add_dependencies(
            {
                "typescript": "^5.2.0",
                "@types/react": "^18.2.0",
                "@types/react-dom": "^18.2.0",
            },
            dev=True,
        )
    if tailwind:
        manifest.add_dependencies(
            {
                "tailwindcss": "^3.3.0",
                "autoprefixer": "^10.4.0",
                "postcss": "^8.4.0",
            },
            dev=True,
        )


# ---------------------------------------------------------------------------
# React + Vite
# ---------------------------------------------------------------------------


def render_react(config: ProjectConfig, renderer: TemplateRenderer) -> TemplateOutput:
    """Render a React single-page app built with Vite."""
    ctx = frontend_context(config)
    options = config.frontend
    ext = ctx["ext"]

    manifest = PackageManifest(
        name=config.identifier,
        version="0.0.0",
        private=True,
        scripts={
            "dev": "vite",
            "build": "tsc && vite build" if options.typescript else "vite build",
            "preview": "vite preview",
        },
        dependencies={
            "react": "^18.2.0",
            "react-dom": "^18.2.0",
            "react-router-dom": "^6.20.0",
        },
        devDependencies={
            "vite": "^5.0.0",
            "@vitejs/plugin-react": "^4.2.0",
        },
    )
    _add_styling_packages(manifest, typescript=options.typescript, tailwind=options.tailwind)

    output = TemplateOutput([manifest.to_file()])
    for template, path in (
        ("frontend/react/vite.config.js.j2", "vite.config.js"),
        ("frontend/react/index.html.j2", "index.html"),
        ("frontend/react/main.j2", f"src/main.{ext}"),
        ("frontend/react/App.j2", f"src/App.{ext}"),
        ("frontend/react/MainLayout.j2", f"src/layouts/MainLayout.{ext}"),
        ("frontend/react/Home.j2", f"src/pages/Home.{ext}"),
        ("frontend/react/ZenuxsPage.j2", f"src/pages/ZenuxsPage.{ext}"),
        ("frontend/react/Navbar.j2", f"src/components/Navbar.{ext}"),
        ("frontend/react/Footer.j2", f"src/components/Footer.{ext}"),
        ("frontend/react/globals.css.j2", "src/styles/globals.css"),
    ):
        output.add(renderer.render_file(template, path, ctx))

    if options.typescript:
        output.add(renderer.render_file("frontend/react/tsconfig.json.j2", "tsconfig.json", ctx))
        output.add(
            renderer.render_file("frontend/react/tsconfig.node.json.j2", "tsconfig.node.json", ctx)
        )

    if options.tailwind:
        _tailwind_files(output, renderer, ["./index.html", "./src/**/*.{js,ts,jsx,tsx}"])

    if options.auth_ui:
        auth_ctx = {
            **ctx,
            "cls": AUTH_CLASSES_TAILWIND if options.tailwind else AUTH_CLASSES_PLAIN,
        }
        for page in _AUTH_PAGES:
            output.add(
                renderer.render_file(
                    f"frontend/react/auth/{page}.j2", f"src/pages/auth/{page}.{ext}", auth_ctx
                )
            )
        if not options.tailwind:
            output.add(
                renderer.render_file(
                    "frontend/react/auth/auth.css.j2", "src/pages/auth/auth.css", auth_ctx
                )
            )

    output.add(gitignore_file(renderer))
    return output


# ---------------------------------------------------------------------------
# Next.js
# ---------------------------------------------------------------------------


def render_next(config: ProjectConfig, renderer: TemplateRenderer) -> TemplateOutput:
    """Render a Next.js app using the App Router."""
    ctx = frontend_context(config)
    options = config.frontend
    ext = ctx["ext"]
    port = config.ports.frontend

    manifest = PackageManifest(
        name=config.identifier,
        version="0.1.0",
        private=True,
        scripts={
            "dev": f"next dev -p {port}",
            "build": "next build",
            "start": f"next start -p {port}",
            "lint": "next lint",
        },
        dependencies={
            "next": "^14.0.0",
            "react": "^18.2.0",
            "react-dom": "^18.2.0",
        },
    )
    _add_styling_packages(manifest, typescript=options.typescript, tailwind=options.tailwind)
    if options.typescript:
        manifest.add_dependencies({"@types/node": "^20.0.0"}, dev=True)

    output = TemplateOutput([manifest.to_file()])
    for template, path in (
        ("frontend/next/next.config.js.j2", "next.config.js"),
        ("frontend/next/layout.j2", f"app/layout.{ext}"),
        ("frontend/next/page.j2", f"app/page.{ext}"),
        ("frontend/next/globals.css.j2", "app/globals.css"),
    ):
        output.add(renderer.render_file(template, path, ctx))

    if options.typescript:
        output.add(renderer.render_file("frontend/next/tsconfig.json.j2", "tsconfig.json", ctx))
        output.add(renderer.render_file("frontend/next/next-env.d.ts.j2", "next-env.d.ts", ctx))

    if options.tailwind:
        _tailwind_files(
            output,
            renderer,
            ["./app/**/*.{js,ts,jsx,tsx}", "./components/**/*.{js,ts,jsx,tsx}"],
        )

    output.add(gitignore_file(renderer, next=True))
    return output
