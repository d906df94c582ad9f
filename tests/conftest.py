"""Shared pytest fixtures for the create-bun-stack test suite.

Provides reusable fixtures for:
- Small on-disk template trees
- Template variables and configurations
- A mocked ``run_command`` for setup steps
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from create_bun_stack.config import DEFAULT_TEMPLATE_DIR, ScaffoldConfig
from create_bun_stack.utils import console


# ---------------------------------------------------------------------------
# Template trees
# ---------------------------------------------------------------------------

BINARY_PAYLOAD = bytes(range(256)) + b"{{projectName}}\x00\xff"


@pytest.fixture
def binary_payload() -> bytes:
    return BINARY_PAYLOAD


@pytest.fixture
def template_tree(tmp_path: Path) -> Path:
    """Two-level template with a text file, a binary file and node_modules.

    Layout::

        a.txt                   "Hello {{projectName}}"
        sub/b.bin               BINARY_PAYLOAD
        node_modules/x.txt      "skip me"
    """
    root = tmp_path / "template"
    (root / "sub").mkdir(parents=True)
    (root / "node_modules").mkdir()
    (root / "a.txt").write_text("Hello {{projectName}}", encoding="utf-8")
    (root / "sub" / "b.bin").write_bytes(BINARY_PAYLOAD)
    (root / "node_modules" / "x.txt").write_text("skip me", encoding="utf-8")
    return root


@pytest.fixture
def bundled_template_dir() -> Path:
    """The template shipped inside the package."""
    assert DEFAULT_TEMPLATE_DIR.is_dir(), f"Bundled template not found at {DEFAULT_TEMPLATE_DIR}"
    return DEFAULT_TEMPLATE_DIR


# ---------------------------------------------------------------------------
# Variables & configuration
# ---------------------------------------------------------------------------

@pytest.fixture
def variables() -> dict[str, str]:
    return {"projectName": "demo", "dbProvider": "sqlite"}


@pytest.fixture
def scaffold_config(tmp_path: Path, template_tree: Path) -> ScaffoldConfig:
    """A config whose project directory lives under ``tmp_path/out``."""
    return ScaffoldConfig(
        project_name="demo",
        db_provider="sqlite",
        output_dir=tmp_path / "out",
        template_dir=template_tree,
    )


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove every CBS_* variable so from_env() sees only what a test sets."""
    for name in (
        "CBS_TEMPLATE_DIR",
        "CBS_OUTPUT_DIR",
        "CBS_DB_PROVIDER",
        "CBS_BUN",
        "CBS_COMMAND_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)


# ---------------------------------------------------------------------------
# Child processes
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_run_command():
    """Patch ``run_command`` as seen by the setup steps; every call succeeds."""
    with patch(
        "create_bun_stack.setup_steps.run_command",
        new_callable=AsyncMock,
        return_value=(0, "", ""),
    ) as mocked:
        yield mocked


@pytest.fixture(autouse=True)
def _reset_console_quiet():
    """``main(["--quiet"])`` flips the shared console; undo it after each test."""
    yield
    console.quiet = False
