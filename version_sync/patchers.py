"""Patch routines for the two kinds of target.

Both are pure: they take the current file text and the new version and
return the old version together with the rewritten text. Nothing here
touches the filesystem.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

from .exceptions import InputError

# First `version = "..."` at the very start of a line (Cargo.toml [package]).
VERSION_LINE_RE = re.compile(r'^version\s*=\s*"([^"]*)"', re.MULTILINE)

JSON_INDENT = 2


def format_version_line(version: str) -> str:
    return f'version = "{version}"'


def patch_json_document(text: str, version: str, path: Path) -> tuple[Any, str]:
    """Set the top-level "version" of a JSON document.

    Key order is kept as parsed; the document is re-serialized with
    two-space indentation and no trailing newline.

    Returns (old_version, new_text).
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InputError(f"Invalid JSON at {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise InputError(f"{path}: top level must be an object")
    if "version" not in data:
        raise InputError(f"{path}: no \"version\" field to update")

    old_version = data["version"]
    data["version"] = version
    return old_version, json.dumps(data, indent=JSON_INDENT, ensure_ascii=False)


def find_version_line(text: str) -> re.Match[str] | None:
    """Return the first `version = "..."` match, if any."""
    return VERSION_LINE_RE.search(text)


def patch_version_line(text: str, version: str, path: Path) -> tuple[str, str, str]:
    """Rewrite the first `version = "..."` line, leaving everything else alone.

    Returns (old_line, old_version, new_text) where old_line is the matched
    substring and old_version the quoted value inside it.
    """
    match = find_version_line(text)
    if match is None:
        raise InputError(f'{path}: no line matching version = "..." found')

    new_text = text[: match.start()] + format_version_line(version) + text[match.end():]
    return match.group(0), match.group(1), new_text
