"""Exception hierarchy for create-bun-stack."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from create_bun_stack.setup_steps import StepResult


class ScaffoldError(Exception):
    """Base class for every error the CLI reports to the user."""


class InputError(ScaffoldError, ValueError):
    """Raised when user input is rejected before anything is written."""


class ProjectNameError(InputError):
    """Raised for an empty, malformed or reserved project name."""


class DbProviderError(InputError):
    """Raised for a database provider outside postgres/sqlite/auto."""


class TargetExistsError(InputError):
    """Raised when the project directory already exists."""

    def __init__(self, path) -> None:
        self.path = path
        super().__init__(f"Directory {path} already exists")


class SetupError(ScaffoldError):
    """Raised when a fatal post-copy setup step fails.

    The message ends with the last lines of the step's captured stderr, if
    any was captured (``--quiet``).
    """

    STDERR_TAIL_LINES = 10

    def __init__(self, result: "StepResult") -> None:
        self.result = result
        message = f"{result.name} failed (exit code {result.returncode}): {result.command_line}"
        tail = result.stderr.strip().splitlines()[-self.STDERR_TAIL_LINES:]
        if tail:
            message += "\n" + "\n".join(tail)
        super().__init__(message)
