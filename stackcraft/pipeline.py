"""stack-craft pipeline orchestrator and CLI entry points.

Runs the scaffolding steps strictly in order:

1. RESOLVE      -- open the template set and locate ``<framework>/<language>``.
2. MATERIALIZE  -- copy the template tree into the project directory.
3. EXTRAS       -- copy the Prisma files, set provider and DATABASE_URL.
4. MANIFEST     -- merge Prisma dependencies and scripts into package.json.
5. POST-SETUP   -- run the install command, then initialise git.

Usage::

    stackcraft                  # full edition, remote templates
    stackcraft-lite             # Express/Hono only, bundled templates
    python -m stackcraft --source local -o ./projects
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from rich.markup import escape
from rich.panel import Panel

from stackcraft import __version__
from stackcraft.config import Config
from stackcraft.errors import ScaffoldError
from stackcraft.models import Edition, ProjectOptions, TemplateSource
from stackcraft.prompts import ProjectPrompter
from stackcraft.scaffolder import (
    LocalTemplateSource,
    RemoteTemplateSource,
    apply_orm_extras,
    init_git_repository,
    install_dependencies,
    materialize,
    patch_manifest,
)
from stackcraft.utils import (
    console,
    print_error,
    print_info,
    print_success,
    print_summary_table,
    print_warning,
)


class Pipeline:
    """Scaffolds one project from a fully populated ``ProjectOptions``.

    Attributes:
        config: Global configuration.
        edition: Entry-point variant; decides the default template source.
    """

    def __init__(self, config: Config, edition: Edition = Edition.FULL) -> None:
        self.config = config
        self.edition = edition

    def template_source(self) -> LocalTemplateSource | RemoteTemplateSource:
        """Build the template source selected by config or edition."""
        if self.config.resolve_template_source(self.edition) is TemplateSource.REMOTE:
            return RemoteTemplateSource(self.config.remote)
        return LocalTemplateSource(self.config.templates_dir)

    async def run(self, options: ProjectOptions) -> Path:
        """Run every step for *options* and return the project directory.

        Raises:
            ScaffoldError: On the first fatal failure.  Later steps do not run.
        """
        target = self.config.output_dir / options.name

        async with self.template_source().open() as templates:
            template_dir = templates.resolve(options.framework, options.language)
            print_info(f"Using template {options.framework.value}/{options.language.value}")

            await materialize(template_dir, target)

            if options.use_prisma:
                await apply_orm_extras(templates.orm_dir, target, options.database)

        if options.use_prisma:
            await patch_manifest(target, self.config.orm)

        if options.run_install:
            await install_dependencies(
                target,
                self.config.install_command,
                timeout=self.config.install_timeout,
            )

        if options.init_git:
            await init_git_repository(
                target,
                self.config.commit_message,
                timeout=self.config.git_timeout,
            )

        self._print_final_summary(options, target)
        return target

    def _print_final_summary(self, options: ProjectOptions, target: Path) -> None:
        summary = {
            "Project": options.name,
            "Framework": options.framework.label,
            "Language": options.language.label,
            "Prisma": "yes" if options.use_prisma else "no",
        }
        if options.database is not None:
            summary["Database"] = options.database.label
        summary["Dependencies installed"] = "yes" if options.run_install else "no"
        summary["Git repository"] = "yes" if options.init_git else "no"
        print_summary_table(summary, title="Project Setup")

        print_success(f"Project setup is complete. Your project is ready at {target.resolve()}")
        steps = [f"cd {options.name}"]
        if not options.run_install:
            steps.append(" ".join(self.config.install_command))
        steps.append("npm run dev")
        console.print(
            Panel(
                "\n".join(f"[blue]{escape(step)}[/blue]" for step in steps),
                title="To get started, run the following commands",
                border_style="yellow",
            )
        )


# ---------------------------------------------------------------------------
# CLI entry points
# ---------------------------------------------------------------------------


def _build_parser(edition: Edition) -> argparse.ArgumentParser:
    prog = "stackcraft-lite" if edition is Edition.LITE else "stackcraft"
    frameworks = ", ".join(f.label for f in edition.frameworks)
    parser = argparse.ArgumentParser(
        prog=prog,
        description=f"Create a new {frameworks} project, optionally with Prisma.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--source",
        choices=[s.value for s in TemplateSource],
        default=None,
        help=f"Template source (default: {edition.default_source.value})",
    )
    parser.add_argument(
        "--templates-dir",
        default=None,
        help="Directory of local templates (default: the bundled templates)",
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Directory in which the project folder is created (default: .)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="JSON configuration file (default: read STACKCRAFT_* environment variables)",
    )
    return parser


def _load_config(args: argparse.Namespace) -> Config:
    config = Config.load(Path(args.config)) if args.config else Config.from_env()
    updates: dict[str, object] = {}
    if args.source:
        updates["template_source"] = TemplateSource(args.source)
    if args.templates_dir:
        updates["templates_dir"] = Path(args.templates_dir)
    if args.output:
        updates["output_dir"] = Path(args.output)
    return config.model_copy(update=updates)


def main(argv: list[str] | None = None, edition: Edition = Edition.FULL) -> None:
    """CLI entry point for ``stackcraft`` and ``python -m stackcraft``."""
    parser = _build_parser(edition)
    args = parser.parse_args(argv)

    try:
        config = _load_config(args)
    except (OSError, ValueError) as exc:
        print_error(f"Error: invalid configuration: {exc}")
        sys.exit(1)

    console.print(
        Panel(
            f"[bold]stack-craft[/bold] {__version__} -- scaffold a new web API project",
            border_style="cyan",
        )
    )

    try:
        prompter = ProjectPrompter(
            edition,
            config.output_dir,
            default_name=config.default_project_name,
        )
        options = prompter.collect()
        asyncio.run(Pipeline(config, edition).run(options))
    except ScaffoldError as exc:
        print_error(f"Error ({exc.stage}): {exc}")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print()
        print_warning("Aborted.")
        sys.exit(130)


def main_lite(argv: list[str] | None = None) -> None:
    """CLI entry point for ``stackcraft-lite``."""
    main(argv, edition=Edition.LITE)


if __name__ == "__main__":
    main()
