"""Shared utility functions for cargo-setup.

Provides blocking command execution, file-system helpers, and Rich-based
console reporting.  Warnings and errors go to stderr so that the stdout
stream only carries the success summary.
"""

from __future__ import annotations

import os
import re
import subprocess
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()
err_console = Console(stderr=True)

# ---------------------------------------------------------------------------
# Command execution
# ---------------------------------------------------------------------------


def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    env: dict[str, str] | None = None,
) -> tuple[int, str, str]:
    """Run a command to completion and capture its output.

    There is no timeout: ``cargo new`` is expected to finish quickly and the
    user can always interrupt it.

    Args:
        cmd: Executable followed by its arguments.
        cwd: Working directory for the child process.
        env: Optional extra environment variables merged on top of ``os.environ``.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.

    Raises:
        FileNotFoundError: If the executable cannot be found.
    """
    merged_env: dict[str, str] | None = None
    if env:
        merged_env = {**os.environ, **env}

    completed = subprocess.run(
        cmd,
        cwd=str(cwd) if cwd else None,
        env=merged_env,
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
        check=False,
    )
    return (completed.returncode, completed.stdout.strip(), completed.stderr.strip())


# ---------------------------------------------------------------------------
# String / name helpers
# ---------------------------------------------------------------------------

_CRATE_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_-]*$")


def is_valid_crate_name(name: str) -> bool:
    """Return ``True`` if *name* is usable both as a directory and a crate name.

    Examples::

        is_valid_crate_name("shortid-rs") -> True
        is_valid_crate_name("2fa")        -> False
        is_valid_crate_name("../evil")    -> False
    """
    return bool(_CRATE_NAME_RE.match(name))


def crate_ident(name: str) -> str:
    """Return the Rust identifier for a crate name (``my-crate`` -> ``my_crate``)."""
    return name.replace("-", "_")


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def write_text(path: Path, content: str) -> Path:
    """Create parent dirs and write *content*, replacing any existing file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(escape(key), escape(str(value)))

    console.print(table)


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message to stderr."""
    err_console.print(f"[bold red]{escape(message)}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message to stderr."""
    err_console.print(f"[bold yellow]{escape(message)}[/bold yellow]")
