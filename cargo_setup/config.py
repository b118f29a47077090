"""cargo-setup configuration.

Typed configuration for a single scaffolding run.  Settings use Pydantic v2
models so they are validated at construction time and can be sourced from
environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field

DEFAULT_LICENSE = "MIT"
PROFILE_FILENAME = ".cargo-me.toml"


def default_profile_path() -> Path:
    """Return ``~/.cargo-me.toml`` for the current user."""
    return Path.home() / PROFILE_FILENAME


class Config(BaseModel):
    """Global cargo-setup configuration.

    Instances are created once by the CLI entry point (usually through
    :meth:`from_env`) and handed to the scaffolder.
    """

    profile_path: Path = Field(default_factory=default_profile_path)
    cargo_bin: str = Field(default="cargo", min_length=1, description="Executable used for `cargo new`")
    default_license: str = Field(
        default=DEFAULT_LICENSE,
        min_length=1,
        description="License used when neither an override nor the profile sets one",
    )
    output_dir: Path = Field(default=Path("."), description="Parent directory of the new crate")

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            CARGO_SETUP_PROFILE, CARGO_SETUP_CARGO, CARGO_SETUP_DEFAULT_LICENSE.

        Unset, empty and whitespace-only variables are ignored.
        """
        kwargs: dict[str, object] = {}
        profile = os.environ.get("CARGO_SETUP_PROFILE", "").strip()
        if profile:
            kwargs["profile_path"] = Path(profile).expanduser()
        cargo_bin = os.environ.get("CARGO_SETUP_CARGO", "").strip()
        if cargo_bin:
            kwargs["cargo_bin"] = cargo_bin
        default_license = os.environ.get("CARGO_SETUP_DEFAULT_LICENSE", "").strip()
        if default_license:
            kwargs["default_license"] = default_license
        return cls(**kwargs)
