"""License text catalogue.

Maps SPDX identifiers to Jinja2 templates under ``templates/licenses/``.
Simple expressions such as ``MIT OR Apache-2.0`` (or the legacy cargo form
``MIT/Apache-2.0``) are rendered as the concatenated texts of their parts.
Anything unrecognised falls back to a short placeholder notice.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from .templates import TemplateRenderer

KNOWN_LICENSES: dict[str, str] = {
    "MIT": "licenses/MIT.j2",
    "Apache-2.0": "licenses/Apache-2.0.j2",
    "BSD-2-Clause": "licenses/BSD-2-Clause.j2",
    "BSD-3-Clause": "licenses/BSD-3-Clause.j2",
    "ISC": "licenses/ISC.j2",
    "MPL-2.0": "licenses/MPL-2.0.j2",
    "Unlicense": "licenses/Unlicense.j2",
}

PLACEHOLDER_TEMPLATE = "licenses/placeholder.j2"

_CANONICAL = {key.lower(): key for key in KNOWN_LICENSES}
_EXPRESSION_SPLIT = re.compile(r"\s+(?:OR|AND)\s+|\s*/\s*")
_SEPARATOR = "=" * 78


def canonical_license_id(identifier: str) -> Optional[str]:
    """Return the catalogue spelling of *identifier*, or ``None`` if unknown.

    Lookup is case-insensitive: ``"apache-2.0"`` -> ``"Apache-2.0"``.
    """
    return _CANONICAL.get(identifier.strip().lower())


def split_expression(expression: str) -> list[str]:
    """Split an SPDX expression into its identifiers, dropping parentheses."""
    cleaned = expression.replace("(", " ").replace(")", " ").strip()
    if not cleaned:
        return []
    return [part for part in _EXPRESSION_SPLIT.split(cleaned) if part]


def is_known_license(expression: str) -> bool:
    """True if every identifier in *expression* has a full text available."""
    parts = split_expression(expression)
    return bool(parts) and all(canonical_license_id(p) for p in parts)


def render_license(
    renderer: TemplateRenderer,
    expression: str,
    context: dict[str, Any],
) -> str:
    """Render the ``LICENSE`` file body for *expression*.

    *context* must provide ``year`` and ``holder``.  Unknown identifiers
    never raise; they produce the placeholder notice instead.
    """
    ctx = {**context, "license": expression}
    if not is_known_license(expression):
        return renderer.render(PLACEHOLDER_TEMPLATE, ctx)

    ids = [canonical_license_id(p) for p in split_expression(expression)]
    texts = [renderer.render(KNOWN_LICENSES[i], ctx) for i in ids if i]
    header = f"SPDX-License-Identifier: {expression}\n\n"
    if len(texts) == 1:
        return header + texts[0]

    intro = (
        f"This project is licensed under {expression}.\n"
        "The full text of each license follows.\n\n"
    )
    sections = [f"{_SEPARATOR}\n{i}\n{_SEPARATOR}\n\n{text}" for i, text in zip(ids, texts)]
    return header + intro + "\n".join(sections)
