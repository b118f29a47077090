"""Rendering of the auxiliary files written around a fresh crate.

:func:`render_files` is pure: it takes a :class:`Profile` and a
:class:`ScaffoldRequest` and returns :class:`GeneratedFile` objects without
touching the file system, so it can be exercised with synthetic profiles.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from ..config import DEFAULT_LICENSE
from ..models import GeneratedFile, Profile, ScaffoldRequest, resolve_license
from ..utils import crate_ident
from .licenses import render_license
from .templates import TemplateRenderer


# Template name -> output path relative to the crate root
AUXILIARY_FILES: dict[str, str] = {
    "README.md.j2": "README.md",
    "CHANGELOG.md.j2": "CHANGELOG.md",
    "tests/basic.rs.j2": "tests/basic.rs",
    "benches/bench.rs.j2": "benches/bench.rs",
    "github/workflows/ci.yml.j2": ".github/workflows/ci.yml",
}

LICENSE_PATH = "LICENSE"


def build_context(
    profile: Profile,
    request: ScaffoldRequest,
    *,
    year: Optional[int] = None,
    default_license: str = DEFAULT_LICENSE,
) -> dict[str, Any]:
    """Build the Jinja2 template context for one crate."""
    if year is None:
        year = datetime.now(timezone.utc).year
    return {
        "crate_name": request.project_name,
        "crate_ident": crate_ident(request.project_name),
        "kind": request.kind.value,
        "license": resolve_license(request, profile, default_license),
        "author": profile.author,
        "author_name": profile.name,
        "email": profile.email,
        "github": profile.github,
        "holder": profile.holder,
        "repository": profile.repository_url(request.project_name) or "",
        "year": year,
    }


def render_files(
    profile: Profile,
    request: ScaffoldRequest,
    *,
    year: Optional[int] = None,
    default_license: str = DEFAULT_LICENSE,
    renderer: Optional[TemplateRenderer] = None,
) -> list[GeneratedFile]:
    """Render every auxiliary file for *request*.

    Returns README, LICENSE, CHANGELOG, the test and bench stubs and the CI
    workflow.  Missing profile fields are rendered as blanks or ``"unknown"``.
    """
    renderer = renderer or TemplateRenderer()
    context = build_context(profile, request, year=year, default_license=default_license)

    files = [
        GeneratedFile(output_path, renderer.render(template_name, context))
        for template_name, output_path in AUXILIARY_FILES.items()
    ]
    files.append(
        GeneratedFile(LICENSE_PATH, render_license(renderer, context["license"], context))
    )
    return files
