"""Pydantic v2 models shared by the profile reader, renderer and scaffolder."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from .config import DEFAULT_LICENSE
from .utils import is_valid_crate_name


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------

class Profile(BaseModel):
    """Persisted user identity used to fill in crate metadata.

    Every field is optional; an empty profile renders with blank or
    ``"unknown"`` placeholders.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str = Field(default="", description="Author display name")
    email: str = Field(default="", description="Author e-mail address")
    github: str = Field(default="", description="GitHub user or organisation handle")
    organization: str = Field(default="", description="Copyright holder, if not the author")
    license: str = Field(default="", description="Preferred SPDX license identifier")
    repository_base: Optional[str] = Field(
        default=None,
        description="Base URL for repositories, e.g. https://gitlab.com/me",
    )

    @field_validator("name", "email", "github", "organization", "license", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("name", "email", "github", "organization", "license")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()

    @property
    def author(self) -> str:
        """``"Name <email>"`` as used in ``Cargo.toml``, or ``""`` without a name."""
        if not self.name:
            return ""
        if self.email:
            return f"{self.name} <{self.email}>"
        return self.name

    @property
    def holder(self) -> str:
        """Copyright holder: organisation, then name, then ``"unknown"``."""
        return self.organization or self.name or "unknown"

    def repository_url(self, crate_name: str) -> Optional[str]:
        """Repository URL for *crate_name*, or ``None`` if the profile has no host."""
        if self.repository_base and self.repository_base.strip():
            return f"{self.repository_base.strip().rstrip('/')}/{crate_name}"
        if self.github:
            return f"https://github.com/{self.github}/{crate_name}"
        return None


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------

class CrateKind(str, Enum):
    """Target kind passed through to ``cargo new``."""

    BIN = "bin"
    LIB = "lib"

    @property
    def flag(self) -> str:
        return f"--{self.value}"


class ScaffoldRequest(BaseModel):
    """What the user asked for on the command line."""

    model_config = ConfigDict(frozen=True)

    project_name: str = Field(..., min_length=1, description="Crate and directory name")
    kind: CrateKind = Field(default=CrateKind.LIB)
    license_override: Optional[str] = Field(default=None, description="SPDX id from --license")

    @field_validator("project_name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not is_valid_crate_name(value):
            raise ValueError(
                f"invalid crate name {value!r}: use letters, digits, '-' or '_', "
                "starting with a letter or '_'"
            )
        return value

    @field_validator("license_override")
    @classmethod
    def _blank_override_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value.strip()


def resolve_license(
    request: ScaffoldRequest,
    profile: Profile,
    default: str = DEFAULT_LICENSE,
) -> str:
    """Effective license: override, then profile, then *default*."""
    if request.license_override:
        return request.license_override
    if profile.license:
        return profile.license
    return default


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GeneratedFile:
    """One rendered auxiliary file, relative to the crate root."""

    relative_path: str
    content: str


class FileWriteResult(BaseModel):
    """Outcome of writing a single :class:`GeneratedFile`."""

    relative_path: str
    ok: bool = True
    error: str = ""


class ScaffoldStage(str, Enum):
    """Progress of a scaffolding run.  There is no rollback between stages."""

    IDLE = "idle"
    BASE_CREATED = "base_created"
    METADATA_PATCHED = "metadata_patched"
    FILES_WRITTEN = "files_written"
    DONE = "done"


class ScaffoldReport(BaseModel):
    """Everything the CLI needs to report after a scaffolding run."""

    project_root: Path
    license: str
    stage: ScaffoldStage = ScaffoldStage.IDLE
    profile_warning: Optional[str] = None
    manifest_error: Optional[str] = None
    files: list[FileWriteResult] = Field(default_factory=list)

    @computed_field  # type: ignore[misc]
    @property
    def failed_files(self) -> list[str]:
        """Relative paths of auxiliary files that could not be written."""
        return [f.relative_path for f in self.files if not f.ok]

    @computed_field  # type: ignore[misc]
    @property
    def ok(self) -> bool:
        """True when every post-creation step succeeded."""
        return self.manifest_error is None and not self.failed_files

    def warnings(self) -> list[str]:
        """Human-readable warning lines, in the order the steps ran."""
        lines: list[str] = []
        if self.profile_warning:
            lines.append(self.profile_warning)
        if self.manifest_error:
            lines.append(f"Could not patch Cargo.toml: {self.manifest_error}")
        for result in self.files:
            if not result.ok:
                lines.append(f"Could not write {result.relative_path}: {result.error}")
        return lines
