"""cargo-setup scaffolder -- wraps ``cargo new`` and adds the usual extras.

Quick usage::

    from cargo_setup.scaffolder import ProjectScaffolder
    from cargo_setup.models import CrateKind, ScaffoldRequest

    scaffolder = ProjectScaffolder()
    report = scaffolder.scaffold(ScaffoldRequest(project_name="shortid-rs", kind=CrateKind.BIN))
    print(report.project_root, report.ok)
"""

from cargo_setup.scaffolder.cargo import BaseProjectCreator, CargoNewCreator
from cargo_setup.scaffolder.files import render_files
from cargo_setup.scaffolder.generator import ProjectScaffolder
from cargo_setup.scaffolder.manifest import patch_manifest
from cargo_setup.scaffolder.templates import TemplateRenderer

__all__ = [
    "BaseProjectCreator",
    "CargoNewCreator",
    "ProjectScaffolder",
    "TemplateRenderer",
    "patch_manifest",
    "render_files",
]
