"""stack-craft configuration.

Typed configuration for the scaffolder.  All settings use Pydantic v2 models
so they are validated at construction time and can be loaded from JSON or
environment variables.
"""

from __future__ import annotations

import os
import shlex
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

from stackcraft.models import Edition, TemplateSource

DEFAULT_TEMPLATES_DIR = Path(__file__).parent / "templates"


class RemoteConfig(BaseModel):
    """Location of the remote template repository."""

    repository: str = Field(
        default="dev-rio/stack-craft-templates",
        description="GitHub ``owner/name`` of the template repository",
    )
    # None means the repository's default branch.
    ref: Optional[str] = Field(default=None, description="Branch to fetch")
    clone_depth: int = Field(default=1, ge=1)
    timeout: int = Field(default=300, ge=10, description="Fetch timeout in seconds")

    @property
    def clone_url(self) -> str:
        return f"https://github.com/{self.repository}.git"

    @property
    def archive_url(self) -> str:
        """Tarball of ``ref`` (or the default branch); used when git is not installed."""
        if self.ref is None:
            return f"https://github.com/{self.repository}/archive/HEAD.tar.gz"
        return f"https://github.com/{self.repository}/archive/refs/heads/{self.ref}.tar.gz"


class OrmConfig(BaseModel):
    """Entries merged into ``package.json`` when Prisma is selected."""

    dependencies: dict[str, str] = Field(
        default_factory=lambda: {
            "prisma": "^5.16.2",
            "@prisma/client": "^5.16.2",
            "dotenv": "^16.4.5",
        }
    )
    scripts: dict[str, str] = Field(
        default_factory=lambda: {
            "db:generate": "prisma generate",
            "db:migrate": "prisma migrate deploy",
            "db:push": "prisma db push",
            "db:studio": "prisma studio",
        }
    )
    postinstall: str = Field(
        default="prisma generate",
        description="Always overwrites any existing ``postinstall`` script",
    )


class Config(BaseModel):
    """Global stack-craft configuration.

    Created once by the CLI entry point and handed to ``Pipeline``.
    """

    output_dir: Path = Field(default=Path("."), description="Parent of the new project directory")
    templates_dir: Path = Field(default=DEFAULT_TEMPLATES_DIR)
    # None means "whatever the edition defaults to".
    template_source: Optional[TemplateSource] = Field(default=None)
    default_project_name: str = Field(default="my-project", min_length=1)
    install_command: list[str] = Field(default_factory=lambda: ["npm", "install"], min_length=1)
    # None means no timeout.
    install_timeout: Optional[int] = Field(
        default=None, ge=10, description="Install timeout in seconds"
    )
    git_timeout: Optional[int] = Field(
        default=None, ge=10, description="Timeout per git command in seconds"
    )
    commit_message: str = Field(default="Initial commit", min_length=1)
    remote: RemoteConfig = Field(default_factory=RemoteConfig)
    orm: OrmConfig = Field(default_factory=OrmConfig)

    def resolve_template_source(self, edition: Edition) -> TemplateSource:
        """Return the configured template source, or the edition's default."""
        if self.template_source is not None:
            return self.template_source
        return edition.default_source

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a configuration from a JSON file."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            STACKCRAFT_OUTPUT_DIR, STACKCRAFT_TEMPLATES_DIR,
            STACKCRAFT_TEMPLATE_SOURCE, STACKCRAFT_REPOSITORY, STACKCRAFT_REF,
            STACKCRAFT_INSTALL_COMMAND, STACKCRAFT_COMMIT_MESSAGE.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("STACKCRAFT_OUTPUT_DIR"):
            kwargs["output_dir"] = Path(os.environ["STACKCRAFT_OUTPUT_DIR"])
        if os.environ.get("STACKCRAFT_TEMPLATES_DIR"):
            kwargs["templates_dir"] = Path(os.environ["STACKCRAFT_TEMPLATES_DIR"])
        if os.environ.get("STACKCRAFT_TEMPLATE_SOURCE"):
            kwargs["template_source"] = TemplateSource(os.environ["STACKCRAFT_TEMPLATE_SOURCE"])
        if os.environ.get("STACKCRAFT_INSTALL_COMMAND"):
            kwargs["install_command"] = shlex.split(os.environ["STACKCRAFT_INSTALL_COMMAND"])
        if os.environ.get("STACKCRAFT_COMMIT_MESSAGE"):
            kwargs["commit_message"] = os.environ["STACKCRAFT_COMMIT_MESSAGE"]

        remote_kwargs: dict[str, Any] = {}
        if os.environ.get("STACKCRAFT_REPOSITORY"):
            remote_kwargs["repository"] = os.environ["STACKCRAFT_REPOSITORY"]
        if os.environ.get("STACKCRAFT_REF"):
            remote_kwargs["ref"] = os.environ["STACKCRAFT_REF"]

        return cls(remote=RemoteConfig(**remote_kwargs), **kwargs)
