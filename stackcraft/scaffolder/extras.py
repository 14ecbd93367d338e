"""Prisma extras: schema and env files plus the two database substitutions.

Unlike the main template copy, extras are best-effort: each file is copied on
its own and a missing source file only produces a warning.  The ORM template
directory itself is still required.
"""

from __future__ import annotations

import asyncio
import re
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from stackcraft.errors import ExtrasError, TemplateNotFoundError
from stackcraft.models import Database
from stackcraft.utils import print_warning

SCHEMA_FILE = "schema.prisma"
SCHEMA_DIR = "prisma"
ENV_FILES = (".env", ".env.example")

_PROVIDER_PATTERN = re.compile(r'datasource db\s*{\s*provider\s*=\s*".*"')
_DATABASE_URL_PATTERN = re.compile(r"DATABASE_URL\s*=\s*.*")


@dataclass
class ExtrasResult:
    """What ``apply_orm_extras`` did."""

    copied: list[Path] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    schema_updated: bool = False
    env_files_updated: list[Path] = field(default_factory=list)


def _extra_destinations(project_root: Path) -> dict[str, Path]:
    """Map each extra file name to where it lands in the project."""
    destinations = {SCHEMA_FILE: project_root / SCHEMA_DIR / SCHEMA_FILE}
    for name in ENV_FILES:
        destinations[name] = project_root / name
    return destinations


def copy_orm_files(orm_dir: str | Path, project_root: str | Path) -> ExtrasResult:
    """Copy the schema and env files from *orm_dir* into the project.

    Raises:
        TemplateNotFoundError: If *orm_dir* does not exist.
        ExtrasError: If copying an existing file fails.
    """
    orm_dir = Path(orm_dir)
    project_root = Path(project_root)
    if not orm_dir.is_dir():
        raise TemplateNotFoundError(f"Prisma template path does not exist: {orm_dir}")

    result = ExtrasResult()
    for name, dest in _extra_destinations(project_root).items():
        src = orm_dir / name
        if not src.is_file():
            print_warning(f"{name} not found in {orm_dir}.")
            result.missing.append(name)
            continue
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(src, dest)
        except OSError as exc:
            raise ExtrasError(f"Error copying Prisma files: {exc}") from exc
        result.copied.append(dest)
    return result


def update_schema_provider(project_root: str | Path, database: Database) -> bool:
    """Point the ``datasource db`` block of ``schema.prisma`` at *database*.

    Returns ``False`` (after a warning) when the schema file is absent.
    """
    schema_path = Path(project_root) / SCHEMA_DIR / SCHEMA_FILE
    if not schema_path.is_file():
        print_warning(f"{SCHEMA_FILE} not found at {schema_path}")
        return False

    replacement = f'datasource db {{\n  provider = "{database.provider}"'
    _rewrite(schema_path, _PROVIDER_PATTERN, replacement)
    return True


def update_env_files(project_root: str | Path, database: Database) -> list[Path]:
    """Replace the ``DATABASE_URL`` assignment in each env file.

    Returns the files that were rewritten; absent files are warned about.
    """
    updated: list[Path] = []
    replacement = f'DATABASE_URL="{database.url}"'
    for name in ENV_FILES:
        env_path = Path(project_root) / name
        if not env_path.is_file():
            print_warning(f"Env file {env_path} not found.")
            continue
        _rewrite(env_path, _DATABASE_URL_PATTERN, replacement)
        updated.append(env_path)
    return updated


def _rewrite(path: Path, pattern: re.Pattern[str], replacement: str) -> None:
    try:
        content = path.read_text(encoding="utf-8")
        # Callable replacement so the literal is not parsed for group references.
        content = pattern.sub(lambda _match: replacement, content, count=1)
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise ExtrasError(f"Error updating {path.name}: {exc}") from exc


async def apply_orm_extras(
    orm_dir: str | Path,
    project_root: str | Path,
    database: Database | None = None,
) -> ExtrasResult:
    """Copy the Prisma files and, if a database was chosen, rewrite them."""
    result = await asyncio.to_thread(copy_orm_files, orm_dir, project_root)
    if database is not None:
        result.schema_updated = await asyncio.to_thread(
            update_schema_provider, project_root, database
        )
        result.env_files_updated = await asyncio.to_thread(
            update_env_files, project_root, database
        )
    return result
