"""Template copier -- materialises a template tree with placeholder substitution.

Quick usage::

    from create_bun_stack.scaffolder import (
        copy_template_directory,
        get_exclude_patterns,
    )

    await copy_template_directory(
        "templates/default",
        "/tmp/my-app",
        {"projectName": "my-app", "dbProvider": "sqlite"},
        get_exclude_patterns(),
    )
"""

from create_bun_stack.scaffolder.template import (
    TEXT_EXTENSIONS,
    DbProvider,
    TemplateVariables,
    copy_template_directory,
    copy_template_file,
    get_exclude_patterns,
    is_excluded,
    is_text_file,
    substitute,
)

__all__ = [
    "TEXT_EXTENSIONS",
    "DbProvider",
    "TemplateVariables",
    "copy_template_directory",
    "copy_template_file",
    "get_exclude_patterns",
    "is_excluded",
    "is_text_file",
    "substitute",
]
