"""Exceptions raised by the scaffolding steps.

Every fatal condition is a ``ScaffoldError``.  The CLI catches the base class
once, prints the message in red and exits non-zero.  Advisory conditions
(a missing optional extra file) are never raised; they are printed as warnings.
"""

from __future__ import annotations


class ScaffoldError(Exception):
    """Raised when a scaffolding step fails irrecoverably."""

    stage = "scaffold"

    def __init__(self, message: str, stage: str | None = None) -> None:
        if stage is not None:
            self.stage = stage
        super().__init__(message)


class TemplateNotFoundError(ScaffoldError):
    """The requested template (or the ORM template subtree) does not exist."""

    stage = "resolve"


class TemplateFetchError(ScaffoldError):
    """The remote template repository could not be fetched."""

    stage = "fetch"


class MaterializeError(ScaffoldError):
    """Copying the template tree into the project directory failed."""

    stage = "materialize"


class ExtrasError(ScaffoldError):
    """Copying or rewriting the ORM extras failed with an I/O error."""

    stage = "extras"


class ManifestError(ScaffoldError):
    """``package.json`` is missing, unreadable, or could not be written."""

    stage = "manifest"


class CommandError(ScaffoldError):
    """An external command (package manager, git) failed."""

    stage = "post-setup"

    def __init__(
        self,
        message: str,
        command: str = "",
        returncode: int | None = None,
    ) -> None:
        self.command = command
        self.returncode = returncode
        super().__init__(message)
