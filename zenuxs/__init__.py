"""create-zenuxs-app -- project scaffolding CLI.

Collects a handful of choices (project type, framework, language, styling,
auth and backend capabilities), renders the matching template tree in memory
and writes it to disk.

Quick usage::

    from zenuxs.scaffolder import ProjectConfig, ProjectGenerator

    config = ProjectConfig.model_validate({
        "project_name": "demo",
        "project_type": "backend",
        "backend": {"framework": "express", "database": "mongodb"},
    })
    project_path = await ProjectGenerator(config).generate("/tmp/output")
"""

__version__ = "1.0.0"
