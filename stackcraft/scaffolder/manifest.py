"""Merge the Prisma dependencies and scripts into ``package.json``."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from stackcraft.config import OrmConfig
from stackcraft.errors import ManifestError
from stackcraft.utils import load_json, save_json

MANIFEST_FILE = "package.json"


def merge_orm_entries(manifest: dict[str, Any], orm: OrmConfig) -> dict[str, Any]:
    """Return a copy of *manifest* with the ORM entries merged in.

    Dependencies from *orm* override existing versions.  The added scripts go
    first so existing user scripts of the same name keep their value, then
    ``postinstall`` is applied last and always wins.
    """
    merged = dict(manifest)
    merged["dependencies"] = {
        **(manifest.get("dependencies") or {}),
        **orm.dependencies,
    }
    merged["scripts"] = {
        **orm.scripts,
        **(manifest.get("scripts") or {}),
        "postinstall": orm.postinstall,
    }
    return merged


async def patch_manifest(project_root: str | Path, orm: OrmConfig) -> Path:
    """Rewrite ``<project_root>/package.json`` with the ORM entries merged in.

    Raises:
        ManifestError: If the manifest is absent, is not a JSON object, or
            cannot be read or written.
    """
    manifest_path = Path(project_root) / MANIFEST_FILE
    if not manifest_path.is_file():
        raise ManifestError(f"{MANIFEST_FILE} not found in {project_root}")

    try:
        manifest = load_json(manifest_path)
        await save_json(merge_orm_entries(manifest, orm), manifest_path)
    except (OSError, ValueError, TypeError) as exc:
        # json.JSONDecodeError is a ValueError.
        raise ManifestError(f"Error updating {MANIFEST_FILE}: {exc}") from exc
    return manifest_path
