"""Shared pytest fixtures for the cargo-setup test suite.

Provides reusable fixtures for:
- Sample profiles (complete and empty) and profile files on disk
- A fake base-project creator that mimics ``cargo new``
- Scaffold requests for binary and library crates
"""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Callable, Optional

import pytest

from cargo_setup.config import Config
from cargo_setup.errors import BaseCreationError
from cargo_setup.models import CrateKind, Profile, ScaffoldRequest


# ---------------------------------------------------------------------------
# Fake cargo
# ---------------------------------------------------------------------------

def cargo_new_manifest(name: str) -> str:
    """The manifest ``cargo new`` writes for a fresh crate."""
    return textwrap.dedent(f"""\
        [package]
        name = "{name}"
        version = "0.1.0"
        edition = "2021"

        [dependencies]
        """)


class FakeCargoCreator:
    """Stands in for ``cargo new``: writes ``Cargo.toml`` and ``src/``.

    Args:
        fail_with: If set, raise ``BaseCreationError`` with this stderr and
            create nothing.
        after_create: Optional hook called with the new crate root, used to
            sabotage later steps.
    """

    def __init__(
        self,
        fail_with: Optional[str] = None,
        after_create: Optional[Callable[[Path], None]] = None,
    ) -> None:
        self.fail_with = fail_with
        self.after_create = after_create
        self.calls: list[tuple[str, CrateKind, Path]] = []

    def create_base_project(self, name: str, kind: CrateKind, parent_dir: Path) -> Path:
        self.calls.append((name, kind, parent_dir))
        if self.fail_with is not None:
            raise BaseCreationError(
                f"cargo new {name} {kind.flag} failed (exit 101)",
                command=f"cargo new {name} {kind.flag}",
                stderr=self.fail_with,
                returncode=101,
            )
        root = parent_dir / name
        (root / "src").mkdir(parents=True)
        (root / "Cargo.toml").write_text(cargo_new_manifest(name), encoding="utf-8")
        if kind is CrateKind.BIN:
            (root / "src" / "main.rs").write_text(
                'fn main() {\n    println!("Hello, world!");\n}\n', encoding="utf-8"
            )
        else:
            (root / "src" / "lib.rs").write_text(
                "pub fn add(left: u64, right: u64) -> u64 {\n    left + right\n}\n",
                encoding="utf-8",
            )
        if self.after_create is not None:
            self.after_create(root)
        return root


@pytest.fixture
def fake_cargo() -> FakeCargoCreator:
    """A fake creator that always succeeds."""
    return FakeCargoCreator()


@pytest.fixture
def make_fake_cargo() -> type[FakeCargoCreator]:
    """The fake creator class, for tests that need to configure failures."""
    return FakeCargoCreator


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------

@pytest.fixture
def jd_profile() -> Profile:
    """The profile used throughout the shortid-rs scenario."""
    return Profile(name="JD Plumbing", github="JDPlumbing", license="MIT")


@pytest.fixture
def full_profile() -> Profile:
    """A profile with every field populated."""
    return Profile(
        name="Ada Lovelace",
        email="ada@example.com",
        github="ada",
        organization="Analytical Engines Ltd",
        license="Apache-2.0",
    )


@pytest.fixture
def empty_profile() -> Profile:
    return Profile()


@pytest.fixture
def profile_file(tmp_path: Path) -> Path:
    """A valid ``.cargo-me.toml`` on disk."""
    path = tmp_path / ".cargo-me.toml"
    path.write_text(
        textwrap.dedent("""\
            name = "JD Plumbing"
            email = "jd@example.com"
            github = "JDPlumbing"
            license = "MIT"
            """),
        encoding="utf-8",
    )
    return path


# ---------------------------------------------------------------------------
# Requests & config
# ---------------------------------------------------------------------------

@pytest.fixture
def bin_request() -> ScaffoldRequest:
    return ScaffoldRequest(project_name="shortid-rs", kind=CrateKind.BIN)


@pytest.fixture
def lib_request() -> ScaffoldRequest:
    return ScaffoldRequest(project_name="tiny-lib", kind=CrateKind.LIB)


@pytest.fixture
def isolated_config(tmp_path: Path) -> Config:
    """Config pointing at a profile path that does not exist."""
    return Config(profile_path=tmp_path / "no-such-profile.toml", output_dir=tmp_path)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's own cargo-setup environment out of the tests."""
    for var in ("CARGO_SETUP_PROFILE", "CARGO_SETUP_CARGO", "CARGO_SETUP_DEFAULT_LICENSE"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.delenv("CARGO", raising=False)
