"""Exceptions raised while scaffolding a crate."""

from __future__ import annotations


class ScaffoldError(Exception):
    """Base class for every cargo-setup failure."""


class PreconditionError(ScaffoldError):
    """The base project cannot even be attempted (e.g. ``cargo`` is missing)."""


class BaseCreationError(ScaffoldError):
    """``cargo new`` ran and reported failure.  Nothing was scaffolded."""

    def __init__(self, message: str, command: str = "", stderr: str = "", returncode: int = 1):
        self.command = command
        self.stderr = stderr
        self.returncode = returncode
        super().__init__(message)


class ManifestPatchError(ScaffoldError):
    """``Cargo.toml`` could not be parsed or has no ``[package]`` table."""
