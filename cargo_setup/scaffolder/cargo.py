"""Base project creation through ``cargo new``.

The scaffolder depends on the :class:`BaseProjectCreator` protocol rather
than on ``cargo`` itself so tests can substitute a fake that lays down a
minimal crate.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Protocol

from ..errors import BaseCreationError, PreconditionError
from ..models import CrateKind
from ..utils import run_command


class BaseProjectCreator(Protocol):
    """Creates ``<parent_dir>/<name>`` containing ``Cargo.toml`` and ``src/``."""

    def create_base_project(self, name: str, kind: CrateKind, parent_dir: Path) -> Path:
        """Return the new crate root or raise a ``ScaffoldError`` subclass."""
        ...


class CargoNewCreator:
    """Runs ``cargo new <name> --bin|--lib`` as one blocking step."""

    def __init__(self, cargo_bin: str = "cargo") -> None:
        self.cargo_bin = cargo_bin

    def check_available(self) -> str:
        """Return the resolved cargo executable path.

        Raises:
            PreconditionError: If the executable is not on ``PATH``.
        """
        resolved = shutil.which(self.cargo_bin)
        if resolved is None:
            raise PreconditionError(
                f"'{self.cargo_bin}' was not found on PATH; install Rust from https://rustup.rs"
            )
        return resolved

    def create_base_project(self, name: str, kind: CrateKind, parent_dir: Path) -> Path:
        executable = self.check_available()
        if not parent_dir.is_dir():
            raise PreconditionError(f"Target directory does not exist: {parent_dir}")

        cmd = [executable, "new", name, kind.flag]
        cmd_str = " ".join([self.cargo_bin, "new", name, kind.flag])
        try:
            returncode, _stdout, stderr = run_command(cmd, cwd=parent_dir)
        except OSError as exc:
            raise PreconditionError(f"Could not run {cmd_str}: {exc}") from exc

        if returncode != 0:
            raise BaseCreationError(
                f"{cmd_str} failed (exit {returncode})",
                command=cmd_str,
                stderr=stderr,
                returncode=returncode,
            )
        return parent_dir / name
