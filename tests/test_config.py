"""Unit tests for ScaffoldConfig and input validation (create_bun_stack.config).

Tests cover:
- validate_project_name (valid, empty, too long, malformed, reserved)
- validate_db_provider / resolve_db_choice
- ScaffoldConfig defaults, derived values, validation
- ScaffoldConfig.from_env overrides
- ensure_target_available
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from create_bun_stack.config import (
    DB_PROVIDERS,
    DEFAULT_TEMPLATE_DIR,
    MAX_NAME_LENGTH,
    ScaffoldConfig,
    resolve_db_choice,
    validate_db_provider,
    validate_project_name,
)
from create_bun_stack.errors import (
    DbProviderError,
    InputError,
    ProjectNameError,
    TargetExistsError,
)
from create_bun_stack.scaffolder import TemplateVariables


# ---------------------------------------------------------------------------
# validate_project_name
# ---------------------------------------------------------------------------


class TestValidateProjectName:
    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["my-app", "app2", "My_App", "a.b", "7up"])
    def test_valid_names(self, name: str):
        assert validate_project_name(name) == name

    @pytest.mark.unit
    def test_strips_whitespace(self):
        assert validate_project_name("  my-app \n") == "my-app"

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_empty_rejected(self, name):
        with pytest.raises(ProjectNameError, match="required"):
            validate_project_name(name)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "name", ["../escape", "a/b", "my app", ".hidden", "-flag", "_private", "naïve"]
    )
    def test_malformed_rejected(self, name: str):
        with pytest.raises(ProjectNameError, match="Invalid project name"):
            validate_project_name(name)

    @pytest.mark.unit
    def test_too_long_rejected(self):
        with pytest.raises(ProjectNameError):
            validate_project_name("a" * (MAX_NAME_LENGTH + 1))

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["node_modules", "favicon.ico", "NODE_MODULES"])
    def test_reserved_rejected(self, name: str):
        with pytest.raises(ProjectNameError, match="reserved"):
            validate_project_name(name)

    @pytest.mark.unit
    def test_error_is_input_and_value_error(self):
        with pytest.raises(InputError):
            validate_project_name("")
        with pytest.raises(ValueError):
            validate_project_name("")


# ---------------------------------------------------------------------------
# Database provider
# ---------------------------------------------------------------------------


class TestDbProvider:
    @pytest.mark.unit
    def test_providers(self):
        assert DB_PROVIDERS == ("postgres", "sqlite", "auto")

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value, expected",
        [("postgres", "postgres"), ("SQLite", "sqlite"), (" auto ", "auto"), (None, "auto")],
    )
    def test_validate_db_provider(self, value, expected):
        assert validate_db_provider(value) == expected

    @pytest.mark.unit
    def test_invalid_provider(self):
        with pytest.raises(DbProviderError, match="mysql"):
            validate_db_provider("mysql")

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "answer, expected",
        [("1", "postgres"), ("2", "sqlite"), ("3", "auto"), ("", "auto"), ("9", "auto"), (None, "auto")],
    )
    def test_resolve_db_choice(self, answer, expected):
        assert resolve_db_choice(answer) == expected


# ---------------------------------------------------------------------------
# ScaffoldConfig
# ---------------------------------------------------------------------------


class TestScaffoldConfig:
    @pytest.mark.unit
    def test_defaults(self):
        config = ScaffoldConfig(project_name="demo")
        assert config.db_provider == "auto"
        assert config.output_dir == Path.cwd()
        assert config.template_dir == DEFAULT_TEMPLATE_DIR
        assert config.skip_install is False
        assert config.skip_db_setup is False
        assert config.seed_db is False
        assert config.quiet is False
        assert config.interactive is False
        assert config.bun == "bun"
        assert config.command_timeout == 600

    @pytest.mark.unit
    def test_project_path(self, tmp_path: Path):
        config = ScaffoldConfig(project_name="demo", output_dir=tmp_path)
        assert config.project_path == tmp_path / "demo"

    @pytest.mark.unit
    def test_template_variables(self):
        config = ScaffoldConfig(project_name="demo", db_provider="postgres")
        variables = config.template_variables()
        assert isinstance(variables, TemplateVariables)
        assert variables.as_mapping() == {"projectName": "demo", "dbProvider": "postgres"}

    @pytest.mark.unit
    def test_invalid_name_rejected(self):
        with pytest.raises(ValidationError):
            ScaffoldConfig(project_name="bad name")

    @pytest.mark.unit
    def test_invalid_provider_rejected(self):
        with pytest.raises(ValidationError):
            ScaffoldConfig(project_name="demo", db_provider="mysql")

    @pytest.mark.unit
    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            ScaffoldConfig(project_name="demo", command_timeout=0)

    @pytest.mark.unit
    def test_bundled_template_exists(self):
        assert (DEFAULT_TEMPLATE_DIR / "package.json").is_file()


class TestEnsureTargetAvailable:
    @pytest.mark.unit
    def test_free_target(self, tmp_path: Path):
        ScaffoldConfig(project_name="demo", output_dir=tmp_path).ensure_target_available()

    @pytest.mark.unit
    def test_existing_directory(self, tmp_path: Path):
        (tmp_path / "demo").mkdir()
        config = ScaffoldConfig(project_name="demo", output_dir=tmp_path)
        with pytest.raises(TargetExistsError, match="already exists"):
            config.ensure_target_available()

    @pytest.mark.unit
    def test_existing_file(self, tmp_path: Path):
        (tmp_path / "demo").write_text("", encoding="utf-8")
        config = ScaffoldConfig(project_name="demo", output_dir=tmp_path)
        with pytest.raises(TargetExistsError):
            config.ensure_target_available()


# ---------------------------------------------------------------------------
# from_env
# ---------------------------------------------------------------------------


class TestFromEnv:
    @pytest.mark.unit
    def test_no_env(self, clean_env):
        config = ScaffoldConfig.from_env(project_name="demo")
        assert config.db_provider == "auto"
        assert config.bun == "bun"

    @pytest.mark.unit
    def test_reads_env(self, clean_env, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        monkeypatch.setenv("CBS_TEMPLATE_DIR", str(tmp_path / "tpl"))
        monkeypatch.setenv("CBS_OUTPUT_DIR", str(tmp_path / "out"))
        monkeypatch.setenv("CBS_DB_PROVIDER", "Postgres")
        monkeypatch.setenv("CBS_BUN", "/opt/bun/bin/bun")
        monkeypatch.setenv("CBS_COMMAND_TIMEOUT", "42")

        config = ScaffoldConfig.from_env(project_name="demo")

        assert config.template_dir == tmp_path / "tpl"
        assert config.output_dir == tmp_path / "out"
        assert config.db_provider == "postgres"
        assert config.bun == "/opt/bun/bin/bun"
        assert config.command_timeout == 42

    @pytest.mark.unit
    def test_overrides_win(self, clean_env, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("CBS_DB_PROVIDER", "postgres")
        config = ScaffoldConfig.from_env(project_name="demo", db_provider="sqlite")
        assert config.db_provider == "sqlite"

    @pytest.mark.unit
    def test_none_overrides_ignored(self, clean_env, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("CBS_DB_PROVIDER", "postgres")
        config = ScaffoldConfig.from_env(project_name="demo", db_provider=None, output_dir=None)
        assert config.db_provider == "postgres"
        assert config.output_dir == Path.cwd()

    @pytest.mark.unit
    def test_invalid_env_provider(self, clean_env, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("CBS_DB_PROVIDER", "oracle")
        with pytest.raises(DbProviderError):
            ScaffoldConfig.from_env(project_name="demo")
