"""Post-setup actions: dependency installation and git initialisation.

Both run in the new project directory with the terminal's streams inherited,
so the user sees the package manager's and git's own output.
"""

from __future__ import annotations

from pathlib import Path

from stackcraft.errors import CommandError
from stackcraft.utils import run_command


async def _run_step(cmd: list[str], cwd: Path, timeout: float | None, failure: str) -> None:
    cmd_str = " ".join(cmd)
    try:
        returncode, _, stderr = await run_command(cmd, cwd=cwd, timeout=timeout, capture=False)
    except FileNotFoundError as exc:
        raise CommandError(f"{failure}: {cmd[0]} not found", command=cmd_str) from exc
    if returncode != 0:
        detail = stderr or f"'{cmd_str}' exited with code {returncode}"
        raise CommandError(f"{failure}: {detail}", command=cmd_str, returncode=returncode)


async def install_dependencies(
    project_root: str | Path,
    command: list[str],
    timeout: float | None = None,
) -> None:
    """Run the install command (``npm install`` by default) in the project.

    Raises:
        CommandError: If the command is missing, fails or times out.
    """
    await _run_step(list(command), Path(project_root), timeout, "Error installing dependencies")


async def init_git_repository(
    project_root: str | Path,
    message: str = "Initial commit",
    timeout: float | None = None,
) -> None:
    """Run ``git init``, ``git add .`` and ``git commit -m <message>`` in order.

    Raises:
        CommandError: On the first step that fails.
    """
    for cmd in (
        ["git", "init"],
        ["git", "add", "."],
        ["git", "commit", "-m", message],
    ):
        await _run_step(cmd, Path(project_root), timeout, "Error initializing git repository")
