"""Interactive questions asked when no ``--name`` flag is given.

The answers are returned raw; validation happens in :mod:`create_bun_stack.config`.
Questions use their own console, which ``--quiet`` never silences.
"""

from __future__ import annotations

from rich.console import Console
from rich.prompt import Confirm, Prompt

from create_bun_stack.config import resolve_db_choice

prompt_console = Console()


def ask_project_name() -> str:
    """Ask for the project name (may return an empty string)."""
    return Prompt.ask(
        "[bold]Project name[/bold]", default="", show_default=False, console=prompt_console
    )


def ask_db_provider() -> str:
    """Show the database menu and return ``postgres``, ``sqlite`` or ``auto``."""
    prompt_console.print()
    prompt_console.print("[bold]Database configuration:[/bold]")
    prompt_console.print("  1. PostgreSQL (recommended for production)")
    prompt_console.print("  2. SQLite (perfect for development)")
    prompt_console.print("  3. Auto-detect (PostgreSQL with SQLite fallback)")
    answer = Prompt.ask("Choose database option (1-3)", default="3", console=prompt_console)
    return resolve_db_choice(answer)


def confirm_db_setup() -> bool:
    return Confirm.ask("Setup database now?", default=True, console=prompt_console)


def confirm_seed() -> bool:
    return Confirm.ask("Seed database with sample data?", default=False, console=prompt_console)
