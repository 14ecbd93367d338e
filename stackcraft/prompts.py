"""Interactive prompt sequence.

Collects a ``ProjectOptions`` from the terminal with ``rich.prompt``.  The
only validation beyond the closed choice sets is on the project name: it is
asked again until the target directory does not exist yet.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import TypeVar

from rich.console import Console
from rich.prompt import Confirm, Prompt

from stackcraft.models import (
    MAX_NAME_BYTES,
    Database,
    Edition,
    Framework,
    Language,
    ProjectOptions,
)
from stackcraft.utils import console as default_console
from stackcraft.utils import print_error

E = TypeVar("E", bound=Enum)


class ProjectPrompter:
    """Asks the questions for one edition and builds the ``ProjectOptions``."""

    def __init__(
        self,
        edition: Edition,
        output_dir: str | Path = ".",
        *,
        default_name: str = "my-project",
        console: Console | None = None,
    ) -> None:
        self.edition = edition
        self.output_dir = Path(output_dir)
        self.default_name = default_name
        self.console = console or default_console

    # -- Individual questions ------------------------------------------------

    def ask_project_name(self) -> str:
        """Ask for a project name until it names a directory that does not exist."""
        while True:
            name = Prompt.ask(
                "Enter your project name",
                default=self.default_name,
                console=self.console,
            ).strip()
            if not name:
                print_error("The project name must not be empty.")
                continue
            if "/" in name or "\\" in name or name in (".", ".."):
                print_error(f"'{name}' is not a valid directory name.")
                continue
            if len(name.encode("utf-8")) > MAX_NAME_BYTES:
                print_error(f"The project name must be at most {MAX_NAME_BYTES} bytes long.")
                continue
            try:
                taken = (self.output_dir / name).exists()
            except OSError as exc:
                # e.g. ENAMETOOLONG
                print_error(f"'{name}' cannot be used as a directory name: {exc.strerror}")
                continue
            if taken:
                print_error(
                    f"The project name '{name}' already exists. Please enter a different name."
                )
                continue
            return name

    def ask_choice(self, message: str, members: list[E]) -> E:
        """Single choice among *members*, answered by enum value."""
        by_value = {member.value: member for member in members}
        answer = Prompt.ask(
            message,
            choices=list(by_value),
            default=members[0].value,
            console=self.console,
        )
        return by_value[answer]

    def ask_framework(self) -> Framework:
        return self.ask_choice("Choose the framework", self.edition.frameworks)

    def ask_language(self) -> Language:
        return self.ask_choice("Choose the language", list(Language))

    def ask_database(self) -> Database:
        return self.ask_choice("Choose the database", list(Database))

    def ask_confirm(self, message: str, default: bool) -> bool:
        return Confirm.ask(message, default=default, console=self.console)

    # -- Full sequence -------------------------------------------------------

    def collect(self) -> ProjectOptions:
        """Run the whole sequence for this edition."""
        name = self.ask_project_name()
        framework = self.ask_framework()
        language = self.ask_language()
        use_prisma = self.ask_confirm("Do you want to include Prisma?", default=False)

        database = None
        if use_prisma and self.edition.asks_database:
            database = self.ask_database()

        run_install = self.ask_confirm(
            "Do you want to run 'npm install' after setup?", default=True
        )
        init_git = False
        if self.edition.asks_git:
            init_git = self.ask_confirm(
                "Do you want to initialize a git repository?", default=False
            )

        return ProjectOptions(
            name=name,
            framework=framework,
            language=language,
            use_prisma=use_prisma,
            database=database,
            run_install=run_install,
            init_git=init_git,
        )
