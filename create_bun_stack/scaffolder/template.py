"""Template copying with ``{{variable}}`` substitution.

Walks a template directory depth-first and materialises it under a target
directory.  Files whose name ends with one of ``TEXT_EXTENSIONS`` are read as
UTF-8 and have their ``{{key}}`` placeholders replaced; every other file is
copied byte for byte.  Directory entries whose name contains any exclude
pattern are skipped entirely.

The walk is sequential: every ``await`` completes before the next sibling
entry is visited, so the target tree is fully written (or an ``OSError`` has
propagated) by the time :func:`copy_template_directory` returns.  Nothing is
rolled back on failure.
"""

from __future__ import annotations

import asyncio
import re
import shutil
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


DbProvider = Literal["postgres", "sqlite", "auto"]

# ---------------------------------------------------------------------------
# Fixed configuration
# ---------------------------------------------------------------------------

TEXT_EXTENSIONS: tuple[str, ...] = (
    ".ts",
    ".tsx",
    ".js",
    ".jsx",
    ".json",
    ".md",
    ".txt",
    ".css",
    ".html",
    ".yml",
    ".yaml",
    ".toml",
    ".env",
    ".gitignore",
)

# Matched as plain substrings of each entry name, so "*.log" only matches a
# name that literally contains the asterisk.
_EXCLUDE_PATTERNS: tuple[str, ...] = (
    "node_modules",
    "bun.lock",
    ".db",
    "dist",
    "build",
    ".env.local",
    ".DS_Store",
    "*.log",
)


# ---------------------------------------------------------------------------
# Variables
# ---------------------------------------------------------------------------


class TemplateVariables(BaseModel):
    """Values substituted into ``{{key}}`` placeholders.

    ``projectName`` and ``dbProvider`` are always present.  Any extra keyword
    becomes an additional placeholder; an extra whose value is ``None`` is
    treated as undefined and its placeholder is left alone.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    project_name: str = Field(..., alias="projectName", min_length=1)
    db_provider: DbProvider = Field(..., alias="dbProvider")

    def as_mapping(self) -> dict[str, Optional[str]]:
        """Return the flat ``{placeholder: value}`` mapping."""
        mapping: dict[str, Optional[str]] = {
            "projectName": self.project_name,
            "dbProvider": self.db_provider,
        }
        for key, value in (self.model_extra or {}).items():
            mapping[key] = None if value is None else str(value)
        return mapping


Variables = Union[TemplateVariables, Mapping[str, Optional[str]]]


def _as_mapping(variables: Variables) -> dict[str, Optional[str]]:
    if isinstance(variables, TemplateVariables):
        return variables.as_mapping()
    return dict(variables)


# ---------------------------------------------------------------------------
# Substitution
# ---------------------------------------------------------------------------


def substitute(content: str, variables: Variables) -> str:
    """Replace every ``{{key}}`` in *content* whose key has a defined value.

    All keys are matched in a single scan of the original text, so a value
    that itself looks like a placeholder is inserted verbatim and never
    expanded by another key.  Placeholders for unknown keys, or keys whose
    value is ``None``, are left untouched.
    """
    defined = {
        key: str(value)
        for key, value in _as_mapping(variables).items()
        if value is not None
    }
    if not defined:
        return content

    pattern = re.compile(
        r"\{\{(" + "|".join(re.escape(key) for key in defined) + r")\}\}"
    )
    return pattern.sub(lambda match: defined[match.group(1)], content)


# ---------------------------------------------------------------------------
# Classification and exclusion
# ---------------------------------------------------------------------------


def is_text_file(path: str | Path) -> bool:
    """Return ``True`` if the file name ends with a text extension."""
    return str(path).endswith(TEXT_EXTENSIONS)


def is_excluded(name: str, exclude_patterns: Iterable[str]) -> bool:
    """Return ``True`` if *name* contains any of the patterns."""
    return any(pattern in name for pattern in exclude_patterns)


def get_exclude_patterns() -> list[str]:
    """Return the names skipped when copying a template.

    Dependency and build output, lockfiles, local databases and env files,
    and OS metadata.  ``.gitignore`` and ``CLAUDE.md`` are deliberately not
    listed: generated projects always get them.
    """
    return list(_EXCLUDE_PATTERNS)


# ---------------------------------------------------------------------------
# Copying
# ---------------------------------------------------------------------------


async def copy_template_file(
    source_path: str | Path,
    target_path: str | Path,
    variables: Variables,
) -> Path:
    """Copy one file, substituting placeholders if it is a text file.

    Missing parent directories of *target_path* are created.  An existing
    target is overwritten.  I/O errors propagate unchanged.

    Returns:
        The target path.
    """
    source = Path(source_path)
    target = Path(target_path)
    await asyncio.to_thread(_copy_file, source, target, _as_mapping(variables))
    return target


async def copy_template_directory(
    source_dir: str | Path,
    target_dir: str | Path,
    variables: Variables,
    exclude_patterns: Iterable[str] = (),
) -> list[Path]:
    """Recursively copy *source_dir* into *target_dir*.

    Args:
        source_dir: Template root (or a subdirectory of it).
        target_dir: Destination; created with its ancestors if absent.
        variables: Placeholder values applied to every text file.
        exclude_patterns: Substrings; any entry whose name contains one is
            neither copied nor descended into.

    Returns:
        Every file written, in walk order.
    """
    source = Path(source_dir)
    target = Path(target_dir)
    mapping = _as_mapping(variables)
    patterns = tuple(exclude_patterns)

    await asyncio.to_thread(target.mkdir, parents=True, exist_ok=True)
    entries = await asyncio.to_thread(_list_entries, source)

    written: list[Path] = []
    for entry in entries:
        if is_excluded(entry.name, patterns):
            continue

        destination = target / entry.name
        if entry.is_dir():
            written.extend(
                await copy_template_directory(entry, destination, mapping, patterns)
            )
        else:
            written.append(await copy_template_file(entry, destination, mapping))

    return written


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _list_entries(directory: Path) -> list[Path]:
    """Immediate children of *directory* in the order the OS returns them."""
    return list(directory.iterdir())


def _copy_file(source: Path, target: Path, variables: dict[str, Optional[str]]) -> None:
    """Synchronous helper: create parent dirs, then substitute or copy bytes.

    Text files are decoded as UTF-8 with ``surrogateescape`` so bytes that
    are not valid UTF-8 are written back unchanged.
    """
    target.parent.mkdir(parents=True, exist_ok=True)
    if is_text_file(source):
        with source.open(encoding="utf-8", errors="surrogateescape", newline="") as handle:
            content = handle.read()
        with target.open("w", encoding="utf-8", errors="surrogateescape", newline="") as handle:
            handle.write(substitute(content, variables))
    else:
        shutil.copyfile(source, target)
