"""Post-copy project setup.

Runs, strictly one after another, the commands a freshly copied project
needs: ``bun install``, ``.env`` creation, ``bun run db:push``, optionally
``bun run db:seed``, and ``bun run build:css``.  Every command runs in the
project directory; the tool's own working directory is never changed.

Only dependency installation is fatal.  Every other failure prints a warning
naming the command to rerun and setup carries on.
"""

from __future__ import annotations

import asyncio
import shutil
from collections.abc import Callable
from dataclasses import dataclass, field

from create_bun_stack.config import ScaffoldConfig
from create_bun_stack.errors import SetupError
from create_bun_stack.utils import (
    ensure_dir,
    print_step,
    print_success,
    print_warning,
    run_command,
)

# Shell convention for "command not found".
MISSING_EXECUTABLE = 127


@dataclass
class StepResult:
    """Outcome of one setup step."""

    name: str
    command: list[str]
    returncode: int
    fatal: bool = False
    stderr: str = field(default="", repr=False)

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def command_line(self) -> str:
        return " ".join(self.command)


async def detect_bun_version(bun: str) -> str | None:
    """Return the output of ``bun --version``, or ``None`` if Bun is unusable."""
    try:
        returncode, stdout, _ = await run_command([bun, "--version"], timeout=30)
    except FileNotFoundError:
        return None
    if returncode != 0 or not stdout:
        return None
    return stdout.splitlines()[0]


class ProjectSetup:
    """Runs the setup steps for one generated project.

    Args:
        config: The run's configuration.
        confirm_db_setup: Asked before ``db:push`` when set; otherwise the
            push runs unless ``config.skip_db_setup``.
        confirm_seed: Asked after a successful push when set and
            ``config.seed_db`` is false.
    """

    def __init__(
        self,
        config: ScaffoldConfig,
        *,
        confirm_db_setup: Callable[[], bool] | None = None,
        confirm_seed: Callable[[], bool] | None = None,
    ) -> None:
        self.config = config
        self.confirm_db_setup = confirm_db_setup
        self.confirm_seed = confirm_seed
        self.results: list[StepResult] = []

    # -- Public API --------------------------------------------------------

    async def run(self) -> list[StepResult]:
        """Run every applicable step in order.

        Raises:
            SetupError: If ``bun install`` fails.
        """
        self.results = []
        project_path = self.config.project_path

        await asyncio.to_thread(ensure_dir, project_path / "db")

        if not self.config.skip_install:
            await self.install_dependencies()

        await asyncio.to_thread(self.create_env_file)

        if self._should_setup_db():
            pushed = await self.push_database()
            if pushed.ok and self._should_seed():
                await self.seed_database()

        if not self.config.skip_install:
            await self.build_css()

        return self.results

    async def install_dependencies(self) -> StepResult:
        result = await self._run_step(
            "Installing dependencies", [self.config.bun, "install"], fatal=True
        )
        print_success("Dependencies installed")
        return result

    def create_env_file(self) -> bool:
        """Copy ``.env.example`` to ``.env`` unless ``.env`` already exists."""
        example = self.config.project_path / ".env.example"
        env_file = self.config.project_path / ".env"
        if not example.is_file() or env_file.exists():
            return False
        shutil.copyfile(example, env_file)
        return True

    async def push_database(self) -> StepResult:
        result = await self._run_step(
            "Setting up database", [self.config.bun, "run", "db:push"]
        )
        if result.ok:
            print_success("Database setup complete")
        else:
            print_warning(
                f"Database setup failed - you can run '{result.command_line}' later"
            )
        return result

    async def seed_database(self) -> StepResult:
        result = await self._run_step(
            "Seeding database", [self.config.bun, "run", "db:seed"]
        )
        if result.ok:
            print_success("Database seeded")
        else:
            print_warning(
                f"Database seeding failed - you can run '{result.command_line}' later"
            )
        return result

    async def build_css(self) -> StepResult:
        result = await self._run_step("Building CSS", [self.config.bun, "run", "build:css"])
        if result.ok:
            print_success("CSS built successfully")
        else:
            print_warning(f"CSS build failed - you can run '{result.command_line}' later")
        return result

    # -- Internal helpers --------------------------------------------------

    def _should_setup_db(self) -> bool:
        if self.config.skip_db_setup:
            return False
        # db:push runs drizzle-kit from node_modules.
        if self.config.skip_install:
            print_warning(
                f"Skipping database setup - run '{self.config.bun} install' "
                f"and then '{self.config.bun} run db:push'"
            )
            return False
        if self.confirm_db_setup is not None:
            return self.confirm_db_setup()
        return True

    def _should_seed(self) -> bool:
        if self.config.seed_db:
            return True
        if self.confirm_seed is not None:
            return self.confirm_seed()
        return False

    async def _run_step(
        self, name: str, command: list[str], *, fatal: bool = False
    ) -> StepResult:
        print_step(f"{name}...")
        try:
            returncode, _, stderr = await run_command(
                command,
                cwd=self.config.project_path,
                timeout=self.config.command_timeout,
                capture=self.config.quiet,
            )
        except FileNotFoundError:
            returncode, stderr = MISSING_EXECUTABLE, f"{command[0]}: command not found"

        result = StepResult(
            name=name, command=command, returncode=returncode, fatal=fatal, stderr=stderr
        )
        self.results.append(result)
        if fatal and not result.ok:
            raise SetupError(result)
        return result
