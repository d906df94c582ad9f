"""create-bun-stack -- scaffolds a full-stack Bun application.

Copies the bundled ``templates/default`` tree into a new project directory,
substituting ``{{projectName}}`` / ``{{dbProvider}}`` placeholders, then runs
the post-copy setup steps (``bun install``, ``db:push``, ``db:seed``,
``build:css``).

Quick usage::

    from create_bun_stack import (
        ScaffoldConfig,
        copy_template_directory,
        get_exclude_patterns,
    )

    config = ScaffoldConfig(project_name="my-app", db_provider="sqlite")
    await copy_template_directory(
        config.template_dir,
        config.project_path,
        config.template_variables(),
        get_exclude_patterns(),
    )
"""

from create_bun_stack.config import ScaffoldConfig
from create_bun_stack.scaffolder import (
    TemplateVariables,
    copy_template_directory,
    copy_template_file,
    get_exclude_patterns,
    substitute,
)

__version__ = "0.3.0"

__all__ = [
    "ScaffoldConfig",
    "TemplateVariables",
    "copy_template_directory",
    "copy_template_file",
    "get_exclude_patterns",
    "substitute",
]
