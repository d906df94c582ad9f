"""create-bun-stack command-line interface.

Usage::

    create-bun-stack
    create-bun-stack --name my-app --db sqlite --skip-db-setup --quiet
    python -m create_bun_stack --name my-app --db postgres --seed

Without ``--name`` every choice is asked interactively.  Exit status is 0 on
success and 1 for invalid input, an existing target directory, a copy
failure, or a failed ``bun install``.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
from pathlib import Path

from rich.markup import escape
from rich.panel import Panel

from create_bun_stack import prompts
from create_bun_stack.config import (
    ScaffoldConfig,
    validate_db_provider,
    validate_project_name,
)
from create_bun_stack.errors import InputError, ScaffoldError
from create_bun_stack.renderer import MessageRenderer
from create_bun_stack.scaffolder import copy_template_directory, get_exclude_patterns
from create_bun_stack.setup_steps import ProjectSetup, detect_bun_version
from create_bun_stack.utils import (
    console,
    format_duration,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="create-bun-stack",
        description="Create a full-stack Bun application from a template",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  create-bun-stack\n"
            "  create-bun-stack --name my-app --db sqlite --skip-db-setup\n"
            "  create-bun-stack --name my-app --db postgres --seed --quiet\n"
        ),
    )
    parser.add_argument(
        "--name", "-n",
        default=None,
        help="Project name (prompted for if omitted)",
    )
    # Validated by hand so an invalid value exits 1 like every other input error.
    parser.add_argument(
        "--db",
        default=None,
        metavar="{postgres,sqlite,auto}",
        help="Database provider (default: auto)",
    )
    parser.add_argument(
        "--skip-install",
        action="store_true",
        help="Do not run 'bun install' (also skips db:push and the CSS build)",
    )
    parser.add_argument(
        "--skip-db-setup",
        action="store_true",
        help="Do not run 'bun run db:push'",
    )
    parser.add_argument(
        "--seed",
        action="store_true",
        help="Seed the database after a successful setup",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only print errors",
    )
    parser.add_argument(
        "--template-dir",
        type=Path,
        default=None,
        help="Template directory to copy (default: the bundled template)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory to create the project in (default: current directory)",
    )
    return parser


def resolve_config(args: argparse.Namespace) -> ScaffoldConfig:
    """Turn parsed flags (and, without ``--name``, prompt answers) into a config.

    Raises:
        InputError: For an invalid name or database option, a missing
            template directory, or an existing target directory.
        pydantic.ValidationError: For invalid environment overrides.
    """
    interactive = args.name is None
    if interactive:
        project_name = validate_project_name(prompts.ask_project_name())
    else:
        project_name = validate_project_name(args.name)

    if args.db is not None:
        db_provider = validate_db_provider(args.db)
    elif interactive:
        db_provider = prompts.ask_db_provider()
    else:
        db_provider = None

    config = ScaffoldConfig.from_env(
        project_name=project_name,
        db_provider=db_provider,
        template_dir=args.template_dir,
        output_dir=args.output_dir,
        skip_install=args.skip_install,
        skip_db_setup=args.skip_db_setup,
        seed_db=args.seed,
        quiet=args.quiet,
        interactive=interactive,
    )

    if not config.template_dir.is_dir():
        raise InputError(f"Template directory not found: {config.template_dir}")
    config.ensure_target_available()
    return config


async def create_project(config: ScaffoldConfig, renderer: MessageRenderer) -> None:
    """Copy the template and run the setup steps.

    Raises:
        OSError: If the template copy fails part-way.
        SetupError: If dependency installation fails.
    """
    started = time.monotonic()
    if not config.skip_install:
        bun_version = await detect_bun_version(config.bun)
        if bun_version:
            console.print(f"Using Bun {bun_version}")
        else:
            print_warning(f"{config.bun} was not found; dependency installation will fail")

    console.print()
    console.print(f"[bold]Creating your Bun Stack app in {escape(str(config.project_path))}...[/bold]")

    written = await copy_template_directory(
        config.template_dir,
        config.project_path,
        config.template_variables(),
        get_exclude_patterns(),
    )
    print_success("Project structure created")

    setup = ProjectSetup(
        config,
        confirm_db_setup=prompts.confirm_db_setup if config.interactive else None,
        confirm_seed=prompts.confirm_seed if config.interactive else None,
    )
    results = await setup.run()

    if results:
        console.print()
        print_summary_table(
            {r.command_line: "ok" if r.ok else f"exit {r.returncode}" for r in results},
            title="Setup",
        )

    console.print()
    console.print(
        Panel(
            renderer.success(config, len(written), format_duration(time.monotonic() - started)),
            title="[bold green]SUCCESS[/bold green]",
            border_style="green",
        )
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``create-bun-stack`` / ``python -m create_bun_stack``."""
    args = build_parser().parse_args(argv)
    console.quiet = args.quiet
    renderer = MessageRenderer()

    try:
        console.print(Panel(renderer.welcome(), border_style="bright_cyan"))

        config = resolve_config(args)
        asyncio.run(create_project(config, renderer))
    except KeyboardInterrupt:
        print_error("Aborted")
        sys.exit(130)
    except (ScaffoldError, ValueError) as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)
    except OSError as exc:
        print_error(f"Failed to create project: {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
