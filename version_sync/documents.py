"""Reading and writing the files taking part in a sync.

Every read goes through here so that I/O and parse failures surface as
InputError with the offending path. Writes replace the whole file through a
temp file in the same directory.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from .exceptions import InputError, IntegrationError
from .log import get_logger

_log = get_logger("documents")

YAML_SUFFIXES = {".yaml", ".yml"}


def read_text(path: Path) -> str:
    """Read a UTF-8 file as-is (line endings untouched), wrapping I/O failures."""
    try:
        with path.open(encoding="utf-8", newline="") as handle:
            text = handle.read()
    except FileNotFoundError as exc:
        raise InputError(f"File not found: {path}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise InputError(f"Unable to read {path}: {exc}") from exc
    _log.debug("file_read", extra={"path": str(path), "chars": len(text)})
    return text


def parse_document(text: str, path: Path) -> Any:
    """Parse JSON, or YAML when the file has a .yaml/.yml suffix."""
    if path.suffix.lower() in YAML_SUFFIXES:
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise InputError(f"Invalid YAML at {path}: {exc}") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise InputError(f"Invalid JSON at {path}: {exc}") from exc


def read_authority_version(path: Path) -> str:
    """Return the top-level "version" of the authority file.

    A missing field, or one that is not a non-empty string, is rejected
    here so nothing downstream ever writes a placeholder version.
    """
    data = parse_document(read_text(path), path)
    if not isinstance(data, dict):
        raise InputError(f"{path}: top level must be an object")
    if "version" not in data:
        raise InputError(f"{path}: no \"version\" field")

    version = data["version"]
    if not isinstance(version, str) or not version.strip():
        raise InputError(f"{path}: \"version\" must be a non-empty string, got {version!r}")
    return version


def write_text(path: Path, text: str) -> None:
    """Replace a file's contents in one step (temp file + rename).

    A symlinked target is written through: the link stays, its target changes.
    """
    path = path.resolve()
    _log.debug("file_write", extra={"path": str(path), "chars": len(text)})
    try:
        fd, tmp_path = tempfile.mkstemp(
            dir=str(path.parent),
            prefix=f".{path.name}.",
            suffix=".tmp",
        )
    except OSError as exc:
        raise IntegrationError(f"Unable to write {path}: {exc}") from exc
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        _copy_mode(path, tmp_path)
        os.replace(tmp_path, path)
    except OSError as exc:
        raise IntegrationError(f"Unable to write {path}: {exc}") from exc
    finally:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)


def _copy_mode(path: Path, tmp_path: str) -> None:
    # mkstemp creates 0600; keep the target's original permissions.
    try:
        mode = path.stat().st_mode & 0o7777
    except FileNotFoundError:
        return
    os.chmod(tmp_path, mode)
