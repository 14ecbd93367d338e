"""Template resolution.

A template set is a directory laid out as ``<framework>/<language>/`` plus a
``prisma/`` subtree with the ORM extras.  It comes either from the templates
bundled with the package (``LocalTemplateSource``) or from a shallow checkout
of the remote template repository (``RemoteTemplateSource``).

Both sources are async context managers so the remote one can release its
scratch directory on every exit path::

    async with source.open() as templates:
        template_dir = templates.resolve(Framework.EXPRESS, Language.TYPESCRIPT)
"""

from __future__ import annotations

import asyncio
import shutil
import tarfile
import tempfile
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path

import httpx

from stackcraft.config import RemoteConfig
from stackcraft.errors import TemplateFetchError, TemplateNotFoundError
from stackcraft.models import Framework, Language
from stackcraft.utils import console, print_info, run_command

ORM_TEMPLATE_DIR = "prisma"


@dataclass
class TemplateSet:
    """A directory of templates organised by framework, then language."""

    root: Path

    def path_for(self, framework: Framework, language: Language) -> Path:
        return self.root / framework.value / language.value

    def resolve(self, framework: Framework, language: Language) -> Path:
        """Return the template directory for the pair, verifying it exists.

        Raises:
            TemplateNotFoundError: If the directory is absent.
        """
        path = self.path_for(framework, language)
        if not path.is_dir():
            raise TemplateNotFoundError(f"Template path does not exist: {path}")
        return path

    @property
    def orm_dir(self) -> Path:
        return self.root / ORM_TEMPLATE_DIR


# ---------------------------------------------------------------------------
# Local templates
# ---------------------------------------------------------------------------


class LocalTemplateSource:
    """Templates shipped alongside the tool."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    @asynccontextmanager
    async def open(self) -> AsyncIterator[TemplateSet]:
        yield TemplateSet(self.root)


# ---------------------------------------------------------------------------
# Remote templates
# ---------------------------------------------------------------------------


class RemoteTemplateSource:
    """Templates fetched from a GitHub repository into a per-run scratch dir.

    The repository is shallow-cloned with git when git is on ``PATH``;
    otherwise the branch tarball is downloaded with httpx.  The repository is
    expected to keep its templates under a top-level ``templates/`` directory.
    """

    def __init__(self, remote: RemoteConfig, client: httpx.AsyncClient | None = None) -> None:
        self.remote = remote
        self._client = client

    @asynccontextmanager
    async def open(self) -> AsyncIterator[TemplateSet]:
        scratch = Path(tempfile.mkdtemp(prefix="stackcraft_"))
        try:
            checkout = await self.fetch(scratch)
            yield TemplateSet(checkout / "templates")
        finally:
            await asyncio.to_thread(shutil.rmtree, scratch, True)

    async def fetch(self, scratch: Path) -> Path:
        """Fetch the repository into *scratch* and return the checkout root."""
        if shutil.which("git"):
            return await self._clone(scratch / "checkout")
        print_info("git not found; downloading the template archive instead.")
        return await self._download_archive(scratch)

    async def _clone(self, dest: Path) -> Path:
        cmd = ["git", "clone", f"--depth={self.remote.clone_depth}"]
        if self.remote.ref is not None:
            cmd += ["--branch", self.remote.ref]
        cmd += [self.remote.clone_url, str(dest)]
        with console.status(f"Cloning {self.remote.clone_url} ..."):
            returncode, _, stderr = await run_command(cmd, timeout=self.remote.timeout)
        if returncode != 0:
            raise TemplateFetchError(
                f"Failed to clone {self.remote.clone_url} (exit {returncode}): {stderr}"
            )
        return dest

    async def _download_archive(self, scratch: Path) -> Path:
        archive_path = scratch / "templates.tar.gz"
        url = self.remote.archive_url
        client = self._client or httpx.AsyncClient(follow_redirects=True)
        try:
            with console.status(f"Downloading {url} ..."):
                async with client.stream("GET", url, timeout=self.remote.timeout) as response:
                    if response.status_code != 200:
                        raise TemplateFetchError(
                            f"Download of {url} failed with HTTP {response.status_code}"
                        )
                    with archive_path.open("wb") as fh:
                        async for chunk in response.aiter_bytes():
                            fh.write(chunk)
        except httpx.HTTPError as exc:
            raise TemplateFetchError(f"Download of {url} failed: {exc}") from exc
        finally:
            if self._client is None:
                await client.aclose()

        extract_dir = scratch / "extract"
        try:
            await asyncio.to_thread(_extract_tarball, archive_path, extract_dir)
        except (tarfile.TarError, OSError) as exc:
            raise TemplateFetchError(f"Could not extract {archive_path.name}: {exc}") from exc

        # GitHub archives wrap everything in a single ``<repo>-<ref>/`` folder.
        entries = [p for p in extract_dir.iterdir() if p.is_dir()]
        if len(entries) != 1:
            raise TemplateFetchError(
                f"Unexpected archive layout from {url}: {len(entries)} top-level directories"
            )
        return entries[0]


def _extract_tarball(archive: Path, dest: Path) -> None:
    # Extraction filters are missing on 3.10 before 3.10.12 and 3.11 before 3.11.4.
    if not hasattr(tarfile, "data_filter"):
        raise tarfile.TarError(
            "this Python has no tarfile extraction filters; install git or upgrade Python"
        )
    dest.mkdir(parents=True, exist_ok=True)
    with tarfile.open(archive, "r:gz") as tar:
        tar.extractall(dest, filter="data")
