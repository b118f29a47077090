"""User profile reader.

The profile lives in ``~/.cargo-me.toml`` and is owned by a companion tool;
cargo-setup only ever reads it::

    name = "JD Plumbing"
    email = "jd@example.com"
    github = "JDPlumbing"
    license = "MIT"

A missing, unreadable or invalid file yields an empty :class:`Profile`
together with a warning message, so that scaffolding never fails because of
the profile.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from .config import default_profile_path
from .models import Profile


def read_profile(path: Path | None = None) -> tuple[Profile, Optional[str]]:
    """Load the profile and return it with an optional warning message.

    Args:
        path: Profile file.  Defaults to ``~/.cargo-me.toml``.

    Returns:
        ``(profile, warning)`` where *warning* is ``None`` only when the file
        was read successfully.
    """
    target = Path(path) if path is not None else default_profile_path()
    if not target.exists():
        return Profile(), f"No profile at {target}; using blank metadata"
    if not target.is_file():
        return Profile(), f"Could not read profile {target}: not a regular file"

    try:
        raw = target.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        return Profile(), f"Could not read profile {target}: {exc}"

    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        return Profile(), f"Ignoring malformed profile {target}: {exc}"

    try:
        return Profile.model_validate(data), None
    except ValidationError as exc:
        fields = ", ".join(
            ".".join(str(part) for part in err["loc"]) for err in exc.errors()
        )
        return Profile(), f"Ignoring invalid profile {target} (bad fields: {fields})"


def load_profile(path: Path | None = None) -> Profile:
    """Return the profile at *path*, or an empty one if it is missing or broken."""
    profile, _warning = read_profile(path)
    return profile
