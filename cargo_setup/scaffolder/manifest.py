"""In-place patching of the ``[package]`` table in ``Cargo.toml``.

Only the ``authors``, ``license`` and ``repository`` keys are touched.
Existing lines for those keys are replaced where they stand; missing keys are
appended after the last non-blank line of the table.  Comments, blank lines,
key order and every other table are preserved byte for byte, which makes the
patch idempotent.

An owned key whose value is a table is left alone.  This covers workspace
inheritance (``license.workspace = true`` or ``license = { workspace = true }``)
written by ``cargo new`` inside a workspace.
"""

from __future__ import annotations

import json
import re
import tomllib
from pathlib import Path
from typing import Optional, Union

from ..errors import ManifestPatchError
from ..models import Profile

OWNED_KEYS: tuple[str, ...] = ("authors", "license", "repository")

FieldValue = Union[str, list[str], None]

_TABLE_HEADER = re.compile(r"^\s*\[(\[)?\s*([^\]]+?)\s*\]\]?\s*(?:#.*)?$")
_KEY_PART = r"(?:\"[^\"]*\"|'[^']*'|[A-Za-z0-9_-]+)"
_KEY_LINE = re.compile(rf"^\s*({_KEY_PART}(?:\s*\.\s*{_KEY_PART})*)\s*=\s*(.*)$")
_KEY_PARTS = re.compile(_KEY_PART)
_STRING_LITERAL = re.compile(r"\"(?:\\.|[^\"\\])*\"|'[^']*'")
_LINES = re.compile(r"(?<=\n)")


def manifest_fields(profile: Profile, crate_name: str, license_id: str) -> dict[str, FieldValue]:
    """Values to write into ``[package]``.  ``None`` means "leave alone"."""
    return {
        "authors": [profile.author] if profile.author else None,
        "license": license_id,
        "repository": profile.repository_url(crate_name),
    }


def patch_manifest(text: str, fields: dict[str, FieldValue]) -> str:
    """Return *text* with the owned ``[package]`` keys set from *fields*.

    Raises:
        ManifestPatchError: If *text* is not valid TOML, has no ``[package]``
            table header, or *fields* names a key this module does not own.
    """
    unknown = set(fields) - set(OWNED_KEYS)
    if unknown:
        raise ManifestPatchError(f"refusing to patch unowned keys: {sorted(unknown)}")

    _parse(text)
    lines = [line for line in _LINES.split(text) if line]
    start, end = _package_table_bounds(lines)
    eol = "\r\n" if lines[start].endswith("\r\n") else "\n"

    rendered = {
        key: f"{key} = {_toml_value(value)}{eol}"
        for key, value in fields.items()
        if value is not None
    }

    body = lines[start + 1:end]
    new_body: list[str] = []
    seen: set[str] = set()
    open_string: Optional[str] = None
    i = 0
    while i < len(body):
        parts = _line_key(body[i]) if open_string is None else None
        if parts and parts[0] in OWNED_KEYS:
            key = parts[0]
            span = _value_span(body, i)
            if key in rendered and not _is_table_value(parts, body[i]):
                if key not in seen:
                    new_body.append(rendered[key])
            else:
                new_body.extend(body[i:i + span])
            seen.add(key)
            i += span
            continue
        new_body.append(body[i])
        _depth, open_string = _scan(body[i], open_string)
        i += 1

    missing = [rendered[key] for key in OWNED_KEYS if key in rendered and key not in seen]
    if missing:
        insert_at = len(new_body)
        while insert_at > 0 and not new_body[insert_at - 1].strip():
            insert_at -= 1
        if insert_at > 0 and not new_body[insert_at - 1].endswith("\n"):
            new_body[insert_at - 1] += eol
        new_body[insert_at:insert_at] = missing

    header = lines[start] if lines[start].endswith("\n") else lines[start] + eol
    patched = "".join(lines[:start] + [header] + new_body + lines[end:])
    _parse(patched)
    return patched


def patch_manifest_file(path: Path, fields: dict[str, FieldValue]) -> bool:
    """Patch the manifest at *path* in place.

    Returns ``True`` if the file content changed.  ``OSError`` propagates.
    """
    with path.open(encoding="utf-8", newline="") as fh:
        original = fh.read()
    patched = patch_manifest(original, fields)
    if patched != original:
        with path.open("w", encoding="utf-8", newline="") as fh:
            fh.write(patched)
        return True
    return False


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _parse(text: str) -> dict[str, object]:
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ManifestPatchError(f"Cargo.toml is not valid TOML: {exc}") from exc
    if not isinstance(data.get("package"), dict):
        raise ManifestPatchError("Cargo.toml has no [package] table")
    return data


def _package_table_bounds(lines: list[str]) -> tuple[int, int]:
    """Index of the ``[package]`` header and of the next table header."""
    start: Optional[int] = None
    open_string: Optional[str] = None
    for idx, line in enumerate(lines):
        match = _TABLE_HEADER.match(line) if open_string is None else None
        _depth, open_string = _scan(line, open_string)
        if not match:
            continue
        if start is not None:
            return start, idx
        if match.group(1) is None and match.group(2) == "package":
            start = idx
    if start is None:
        # e.g. ``package = { ... }`` as an inline table
        raise ManifestPatchError("Cargo.toml has no [package] table header")
    return start, len(lines)


def _line_key(line: str) -> Optional[list[str]]:
    """Dotted key of a ``key = value`` line, unquoted, or ``None``."""
    match = _KEY_LINE.match(line)
    if not match:
        return None
    return [part.strip("\"'") for part in _KEY_PARTS.findall(match.group(1))]


def _is_table_value(parts: list[str], line: str) -> bool:
    if len(parts) > 1:
        return True
    match = _KEY_LINE.match(line)
    return bool(match) and match.group(2).lstrip().startswith("{")


def _value_span(body: list[str], index: int) -> int:
    """Number of lines taken by the key/value pair starting at *index*.

    Multi-line arrays are followed until their brackets balance and
    multi-line strings until they close.
    """
    match = _KEY_LINE.match(body[index])
    depth, open_string = _scan(match.group(2) if match else "", None)
    span = 1
    while (depth > 0 or open_string) and index + span < len(body):
        delta, open_string = _scan(body[index + span], open_string)
        depth += delta
        span += 1
    return span


def _scan(line: str, open_string: Optional[str]) -> tuple[int, Optional[str]]:
    """Bracket balance of *line* outside strings and comments.

    *open_string* is the ``\"\"\"`` or ``'''`` delimiter of a multi-line string
    still open at the start of the line; the one open at its end is returned.
    """
    depth = 0
    i = 0
    while i < len(line):
        if open_string is not None:
            close = _closing_delimiter(line, i, open_string)
            if close < 0:
                return depth, open_string
            i = close + 3
            open_string = None
            continue
        ch = line[i]
        if ch == "#":
            break
        if line.startswith(('"""', "'''"), i):
            open_string = line[i:i + 3]
            i += 3
        elif ch in "\"'":
            literal = _STRING_LITERAL.match(line, i)
            i = literal.end() if literal else len(line)
        else:
            if ch == "[":
                depth += 1
            elif ch == "]":
                depth -= 1
            i += 1
    return depth, open_string


def _closing_delimiter(line: str, start: int, delimiter: str) -> int:
    pos = line.find(delimiter, start)
    if delimiter == '"""':
        while pos >= 0 and _escaped(line, pos):
            pos = line.find(delimiter, pos + 1)
    return pos


def _escaped(line: str, pos: int) -> bool:
    backslashes = 0
    while pos - backslashes - 1 >= 0 and line[pos - backslashes - 1] == "\\":
        backslashes += 1
    return backslashes % 2 == 1


def _toml_value(value: Union[str, list[str]]) -> str:
    # JSON string escapes are a subset of TOML basic-string escapes.
    if isinstance(value, list):
        return "[" + ", ".join(json.dumps(v, ensure_ascii=False) for v in value) + "]"
    return json.dumps(value, ensure_ascii=False)
