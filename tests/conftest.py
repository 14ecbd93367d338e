"""Shared pytest fixtures for the stack-craft test suite.

Provides reusable fixtures for:
- A small on-disk template set (one framework/language pair plus Prisma)
- A ``Config`` pointed at temporary directories
- A patched ``run_command`` so no real package manager or git is invoked
"""

from __future__ import annotations

import json
import textwrap
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from stackcraft.config import Config
from stackcraft.models import TemplateSource


# ---------------------------------------------------------------------------
# Template sets
# ---------------------------------------------------------------------------

SAMPLE_PACKAGE_JSON: dict = {
    "name": "express-typescript-starter",
    "version": "1.0.0",
    "scripts": {
        "dev": "ts-node-dev src/app.ts",
        "postinstall": "echo user-hook",
        "db:push": "custom push",
    },
    "dependencies": {"express": "^4.19.2"},
}

SAMPLE_SCHEMA = textwrap.dedent(
    """\
    generator client {
      provider = "prisma-client-js"
    }

    datasource db {
      provider = "sqlite"
      url      = env("DATABASE_URL")
    }
    """
)


@pytest.fixture
def template_root(tmp_path: Path) -> Path:
    """Template set with ``express/typescript`` and a full ``prisma/`` subtree."""
    root = tmp_path / "templates"
    express_ts = root / "express" / "typescript"
    (express_ts / "src" / "routes").mkdir(parents=True)
    (express_ts / "package.json").write_text(
        json.dumps(SAMPLE_PACKAGE_JSON, indent=2) + "\n", encoding="utf-8"
    )
    (express_ts / "src" / "app.ts").write_text("// app\n", encoding="utf-8")
    (express_ts / "src" / "routes" / "index.ts").write_text("// routes\n", encoding="utf-8")
    (express_ts / ".gitignore").write_text("node_modules/\n", encoding="utf-8")

    prisma = root / "prisma"
    prisma.mkdir()
    (prisma / "schema.prisma").write_text(SAMPLE_SCHEMA, encoding="utf-8")
    (prisma / ".env").write_text('DATABASE_URL="file:./dev.db"\n', encoding="utf-8")
    (prisma / ".env.example").write_text(
        '# example\nDATABASE_URL = "file:./dev.db"\nOTHER=1\n', encoding="utf-8"
    )
    return root


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Directory in which projects get created."""
    out = tmp_path / "out"
    out.mkdir()
    return out


@pytest.fixture
def local_config(template_root: Path, output_dir: Path) -> Config:
    """Config that reads ``template_root`` and writes into ``output_dir``."""
    return Config(
        output_dir=output_dir,
        templates_dir=template_root,
        template_source=TemplateSource.LOCAL,
    )


# ---------------------------------------------------------------------------
# Subprocess mocking
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_run_command():
    """Patch ``run_command`` where post-setup uses it; every call succeeds."""
    mock = AsyncMock(return_value=(0, "", ""))
    with patch("stackcraft.scaffolder.post_setup.run_command", new=mock):
        yield mock
