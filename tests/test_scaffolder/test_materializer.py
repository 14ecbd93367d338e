"""Tests for the staged template copy (stackcraft.scaffolder.materializer)."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from stackcraft.errors import MaterializeError
from stackcraft.scaffolder.materializer import materialize


pytestmark = [pytest.mark.unit, pytest.mark.asyncio]


def _tree(root: Path) -> set[str]:
    return {str(p.relative_to(root)) for p in root.rglob("*")}


async def test_copies_whole_tree(template_root: Path, output_dir: Path):
    source = template_root / "express" / "typescript"
    target = output_dir / "demo"

    result = await materialize(source, target)

    assert result == target
    assert _tree(target) == _tree(source)
    assert (target / ".gitignore").read_text(encoding="utf-8") == "node_modules/\n"


async def test_creates_missing_parents(template_root: Path, tmp_path: Path):
    target = tmp_path / "a" / "b" / "demo"
    await materialize(template_root / "express" / "typescript", target)
    assert (target / "package.json").is_file()


async def test_no_staging_leftovers(template_root: Path, output_dir: Path):
    await materialize(template_root / "express" / "typescript", output_dir / "demo")
    assert [p.name for p in output_dir.iterdir()] == ["demo"]


async def test_missing_source_raises_without_target(tmp_path: Path, output_dir: Path):
    target = output_dir / "demo"
    with pytest.raises(MaterializeError, match="Error copying files"):
        await materialize(tmp_path / "nope", target)
    assert not target.exists()
    assert list(output_dir.iterdir()) == []


async def test_copy_failure_leaves_nothing_behind(template_root: Path, output_dir: Path):
    target = output_dir / "demo"

    def partial_copy(src, dst, symlinks=False):
        Path(dst).mkdir()
        (Path(dst) / "package.json").write_text("{}", encoding="utf-8")
        raise OSError("disk full")

    with patch("stackcraft.scaffolder.materializer.shutil.copytree", side_effect=partial_copy):
        with pytest.raises(MaterializeError, match="disk full"):
            await materialize(template_root / "express" / "typescript", target)

    assert not target.exists()
    assert list(output_dir.iterdir()) == []


async def test_existing_non_empty_target_is_not_merged(template_root: Path, output_dir: Path):
    target = output_dir / "demo"
    target.mkdir()
    (target / "keep.txt").write_text("mine", encoding="utf-8")

    with pytest.raises(MaterializeError):
        await materialize(template_root / "express" / "typescript", target)

    assert _tree(target) == {"keep.txt"}
