"""create-bun-stack configuration.

A single typed settings object built once at startup (from command-line
flags, falling back to ``CBS_*`` environment variables) and passed to every
component.  Nothing else in the package reads the environment.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, get_args

from pydantic import BaseModel, Field, field_validator

from create_bun_stack.errors import DbProviderError, ProjectNameError, TargetExistsError
from create_bun_stack.scaffolder import DbProvider, TemplateVariables

DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates" / "default"

DB_PROVIDERS: tuple[str, ...] = get_args(DbProvider)

# Answers to the interactive database menu.
DB_PROVIDER_CHOICES: dict[str, str] = {
    "1": "postgres",
    "2": "sqlite",
    "3": "auto",
}

# npm refuses to publish packages with these names.
RESERVED_NAMES = frozenset({"node_modules", "favicon.ico"})
MAX_NAME_LENGTH = 214
_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def validate_project_name(name: str | None) -> str:
    """Return the stripped project name or raise ``ProjectNameError``.

    The name becomes both a directory under the output directory and the
    ``name`` field of the generated ``package.json``, so it must be usable as
    either: no path separators, no leading dot or dash, no whitespace.
    """
    stripped = (name or "").strip()
    if not stripped:
        raise ProjectNameError("Project name is required")
    if len(stripped) > MAX_NAME_LENGTH:
        raise ProjectNameError(
            f"Project name must be at most {MAX_NAME_LENGTH} characters"
        )
    if not _NAME_RE.match(stripped):
        raise ProjectNameError(
            f"Invalid project name {stripped!r}: use letters, digits, '.', '_' "
            "and '-', starting with a letter or digit"
        )
    if stripped.lower() in RESERVED_NAMES:
        raise ProjectNameError(f"{stripped!r} is a reserved name")
    return stripped


def validate_db_provider(value: str | None) -> str:
    """Return a normalised provider name or raise ``DbProviderError``."""
    provider = (value or "auto").strip().lower()
    if provider not in DB_PROVIDERS:
        raise DbProviderError(
            f"Invalid database option {value!r}: choose one of {', '.join(DB_PROVIDERS)}"
        )
    return provider


def resolve_db_choice(answer: str | None) -> str:
    """Map an interactive menu answer to a provider; anything unknown is ``auto``."""
    return DB_PROVIDER_CHOICES.get((answer or "").strip(), "auto")


# ---------------------------------------------------------------------------
# Configuration model
# ---------------------------------------------------------------------------


class ScaffoldConfig(BaseModel):
    """Everything one ``create-bun-stack`` run needs to know.

    Instances are created once by the CLI and then handed to the copier and
    to :class:`~create_bun_stack.setup_steps.ProjectSetup`.
    """

    project_name: str
    db_provider: DbProvider = Field(default="auto")
    output_dir: Path = Field(default_factory=Path.cwd)
    template_dir: Path = Field(default=DEFAULT_TEMPLATE_DIR)
    skip_install: bool = Field(default=False, description="Skip `bun install` and the CSS build")
    skip_db_setup: bool = Field(default=False, description="Skip `bun run db:push`")
    seed_db: bool = Field(default=False, description="Run `bun run db:seed` without asking")
    quiet: bool = Field(default=False, description="Capture child-process output")
    interactive: bool = Field(default=False, description="Ask before database setup and seeding")
    bun: str = Field(default="bun", description="Bun executable")
    command_timeout: int = Field(default=600, ge=1, description="Per-command timeout in seconds")

    @field_validator("project_name")
    @classmethod
    def _check_project_name(cls, value: str) -> str:
        return validate_project_name(value)

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def project_path(self) -> Path:
        """Directory the project is generated into."""
        return self.output_dir / self.project_name

    def template_variables(self) -> TemplateVariables:
        """Placeholder values for the template copy."""
        return TemplateVariables(
            projectName=self.project_name,
            dbProvider=self.db_provider,
        )

    def ensure_target_available(self) -> None:
        """Raise ``TargetExistsError`` if the project directory already exists."""
        if self.project_path.exists():
            raise TargetExistsError(self.project_name)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls, **overrides: Any) -> "ScaffoldConfig":
        """Build a ``ScaffoldConfig`` from environment variables plus overrides.

        Recognised variables (all optional):
            CBS_TEMPLATE_DIR, CBS_OUTPUT_DIR, CBS_DB_PROVIDER, CBS_BUN,
            CBS_COMMAND_TIMEOUT.

        Overrides whose value is ``None`` are ignored, so argparse defaults
        do not mask the environment.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("CBS_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(os.environ["CBS_TEMPLATE_DIR"])
        if os.environ.get("CBS_OUTPUT_DIR"):
            kwargs["output_dir"] = Path(os.environ["CBS_OUTPUT_DIR"])
        if os.environ.get("CBS_DB_PROVIDER"):
            kwargs["db_provider"] = validate_db_provider(os.environ["CBS_DB_PROVIDER"])
        if os.environ.get("CBS_BUN"):
            kwargs["bun"] = os.environ["CBS_BUN"]
        if os.environ.get("CBS_COMMAND_TIMEOUT"):
            kwargs["command_timeout"] = int(os.environ["CBS_COMMAND_TIMEOUT"])

        kwargs.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**kwargs)
