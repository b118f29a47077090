"""Main scaffolding orchestrator.

Runs ``cargo new`` (through a :class:`BaseProjectCreator`), patches the new
``Cargo.toml`` with profile metadata and writes the auxiliary files around it.
Only base creation is fatal; every later step is best effort and reported in
the returned :class:`ScaffoldReport`.  Nothing is ever rolled back.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

from ..config import Config
from ..errors import ManifestPatchError
from ..models import (
    FileWriteResult,
    GeneratedFile,
    Profile,
    ScaffoldReport,
    ScaffoldRequest,
    ScaffoldStage,
    resolve_license,
)
from ..profile import read_profile
from ..utils import write_text
from .cargo import BaseProjectCreator, CargoNewCreator
from .files import render_files
from .manifest import manifest_fields, patch_manifest_file
from .templates import TemplateRenderer

ProfileLoader = Callable[[], tuple[Profile, Optional[str]]]


class ProjectScaffolder:
    """Scaffolds one crate per :meth:`scaffold` call.

    Args:
        creator: Base project creator.  Defaults to ``cargo new``.
        config: Run configuration (profile path, default license, ...).
        profile_loader: Returns ``(profile, warning)``.  Defaults to reading
            ``config.profile_path``.
    """

    def __init__(
        self,
        creator: Optional[BaseProjectCreator] = None,
        config: Optional[Config] = None,
        profile_loader: Optional[ProfileLoader] = None,
    ) -> None:
        self.config = config or Config()
        self.creator = creator or CargoNewCreator(self.config.cargo_bin)
        self.profile_loader = profile_loader or (lambda: read_profile(self.config.profile_path))
        self.renderer = TemplateRenderer()

    # -- Public API --------------------------------------------------------

    def scaffold(
        self,
        request: ScaffoldRequest,
        *,
        profile: Optional[Profile] = None,
        parent_dir: Optional[Path] = None,
        year: Optional[int] = None,
    ) -> ScaffoldReport:
        """Create the crate and everything around it.

        Args:
            request: Crate name, kind and optional license override.
            profile: Use this profile instead of calling the loader.
            parent_dir: Directory in which the crate directory is created.
                Defaults to ``config.output_dir``.
            year: Copyright year; defaults to the current year.

        Returns:
            The run report.  ``report.ok`` is ``False`` after partial failures.

        Raises:
            PreconditionError: The base creator cannot run at all.
            BaseCreationError: ``cargo new`` reported failure.
        """
        parent = Path(parent_dir) if parent_dir is not None else self.config.output_dir

        # 1. Base project (fatal on failure)
        project_root = self.creator.create_base_project(request.project_name, request.kind, parent)

        # 2. Profile
        warning: Optional[str] = None
        if profile is None:
            profile, warning = self.profile_loader()

        # 3. Effective license
        license_id = resolve_license(request, profile, self.config.default_license)

        report = ScaffoldReport(
            project_root=project_root,
            license=license_id,
            stage=ScaffoldStage.BASE_CREATED,
            profile_warning=warning,
        )

        # 4. Cargo.toml metadata
        if self._patch_manifest(report, profile, request, license_id):
            report.stage = ScaffoldStage.METADATA_PATCHED

        # 5. Auxiliary files (attempted even if the manifest patch failed)
        files = render_files(
            profile,
            request,
            year=year,
            default_license=self.config.default_license,
            renderer=self.renderer,
        )
        report.files = [_write_generated(project_root, f) for f in files]
        if report.stage is ScaffoldStage.METADATA_PATCHED and not report.failed_files:
            report.stage = ScaffoldStage.FILES_WRITTEN

        # 6. Report
        if report.stage is ScaffoldStage.FILES_WRITTEN:
            report.stage = ScaffoldStage.DONE
        return report

    # -- Steps -------------------------------------------------------------

    def _patch_manifest(
        self,
        report: ScaffoldReport,
        profile: Profile,
        request: ScaffoldRequest,
        license_id: str,
    ) -> bool:
        manifest_path = report.project_root / "Cargo.toml"
        fields = manifest_fields(profile, request.project_name, license_id)
        try:
            patch_manifest_file(manifest_path, fields)
        except (ManifestPatchError, OSError, UnicodeDecodeError) as exc:
            report.manifest_error = str(exc)
            return False
        return True


def _write_generated(root: Path, generated: GeneratedFile) -> FileWriteResult:
    """Write one file; I/O errors are captured rather than raised."""
    try:
        write_text(root / generated.relative_path, generated.content)
    except OSError as exc:
        return FileWriteResult(relative_path=generated.relative_path, ok=False, error=str(exc))
    return FileWriteResult(relative_path=generated.relative_path)
