"""stack-craft scaffolder -- turns a template directory into a new project.

Each step is a small module that the pipeline calls in order:

* ``resolver``     -- find ``<framework>/<language>`` locally or in a remote checkout
* ``materializer`` -- copy the template tree into the project directory
* ``extras``       -- copy the Prisma files and rewrite provider / DATABASE_URL
* ``manifest``     -- merge Prisma dependencies and scripts into ``package.json``
* ``post_setup``   -- run the install command and initialise git

Quick usage::

    from stackcraft.scaffolder import LocalTemplateSource, materialize

    async with LocalTemplateSource(root).open() as templates:
        source = templates.resolve(Framework.HONO, Language.TYPESCRIPT)
        await materialize(source, Path("my-project"))
"""

from stackcraft.scaffolder.extras import ExtrasResult, apply_orm_extras
from stackcraft.scaffolder.manifest import merge_orm_entries, patch_manifest
from stackcraft.scaffolder.materializer import materialize
from stackcraft.scaffolder.post_setup import init_git_repository, install_dependencies
from stackcraft.scaffolder.resolver import (
    LocalTemplateSource,
    RemoteTemplateSource,
    TemplateSet,
)

__all__ = [
    "ExtrasResult",
    "LocalTemplateSource",
    "RemoteTemplateSource",
    "TemplateSet",
    "apply_orm_extras",
    "init_git_repository",
    "install_dependencies",
    "materialize",
    "merge_orm_entries",
    "patch_manifest",
]
