"""Copy a resolved template tree into the new project directory.

The copy is staged: the tree is copied into a hidden sibling directory and
then renamed into place, so a failure part-way through never leaves a
half-written project behind.  Rename within one parent directory is atomic on
POSIX and Windows.
"""

from __future__ import annotations

import asyncio
import shutil
import tempfile
from pathlib import Path

from stackcraft.errors import MaterializeError


async def materialize(source: str | Path, target: str | Path) -> Path:
    """Recursively copy *source* into *target*.

    Args:
        source: Template directory to copy.
        target: Project directory to create.  Its parent is created if needed.
            The target itself must not exist (an empty directory is tolerated).

    Returns:
        The project directory.

    Raises:
        MaterializeError: If the copy or the final rename fails.  Nothing is
            left at *target* in that case.
    """
    source = Path(source)
    target = Path(target)
    try:
        await asyncio.to_thread(_staged_copy, source, target)
    except (OSError, shutil.Error) as exc:
        raise MaterializeError(f"Error copying files: {exc}") from exc
    return target


def _staged_copy(source: Path, target: Path) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    staging = Path(tempfile.mkdtemp(prefix=".stackcraft-staging-", dir=target.parent))
    tree = staging / "tree"
    try:
        shutil.copytree(source, tree, symlinks=True)
        tree.rename(target)
    finally:
        shutil.rmtree(staging, ignore_errors=True)
