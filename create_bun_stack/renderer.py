"""Jinja2 rendering for the text the CLI prints.

The welcome banner, the per-database instructions and the closing summary
live as ``.j2`` files under ``create_bun_stack/messages/``.  They are
unrelated to the project template: the copied application files only ever go
through :func:`create_bun_stack.scaffolder.substitute`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape
from rich.markup import escape

from create_bun_stack.config import ScaffoldConfig

_DEFAULT_MESSAGE_DIR = Path(__file__).parent / "messages"

# Scripts defined in the template's package.json, shown in the summary.
AVAILABLE_COMMANDS: dict[str, str] = {
    "bun run dev": "Start development server",
    "bun test": "Run tests",
    "bun run db:studio": "Open database GUI",
    "bun run build": "Build for production",
}


class MessageRenderer:
    """Renders the CLI's ``.j2`` message templates."""

    def __init__(self, message_dir: str | Path | None = None) -> None:
        if message_dir is None:
            message_dir = _DEFAULT_MESSAGE_DIR
        self.message_dir = Path(message_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.message_dir)),
            autoescape=select_autoescape([]),
            undefined=StrictUndefined,
            keep_trailing_newline=False,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["rich_escape"] = escape

    def render(self, template_name: str, context: dict[str, Any]) -> str:
        """Render one message template with *context*."""
        template = self.env.get_template(template_name)
        return template.render(**context)

    # -- Named messages ----------------------------------------------------

    def welcome(self) -> str:
        return self.render("welcome.txt.j2", {})

    def db_instructions(self, config: ScaffoldConfig) -> str:
        """Explain what the chosen database provider needs from the user."""
        return self.render(
            "db_instructions.txt.j2",
            {"provider": config.db_provider, "project_name": config.project_name},
        )

    def success(self, config: ScaffoldConfig, file_count: int, duration: str) -> str:
        """The closing "next steps" summary."""
        return self.render(
            "success.txt.j2",
            {
                "project_name": config.project_name,
                "project_path": config.project_path,
                "file_count": file_count,
                "duration": duration,
                "db_instructions": self.db_instructions(config),
                "commands": AVAILABLE_COMMANDS,
                "skip_install": config.skip_install,
                "skip_db_setup": config.skip_db_setup,
            },
        )
