"""Project root resolution and target configuration.

The root comes from, in order: --root, $VERSION_SYNC_ROOT, the caller's
default (the wrapper script passes its repository root), the working
directory. Targets come from an optional .version-sync.yaml at the root:

    authority: package.json
    targets:
      - path: src-tauri/tauri.conf.json
        format: json
      - path: src-tauri/Cargo.toml
        format: text
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from .exceptions import InputError
from .log import get_logger

_log = get_logger("config")

ROOT_ENV_VAR = "VERSION_SYNC_ROOT"
CONFIG_FILENAME = ".version-sync.yaml"

DEFAULT_AUTHORITY = "package.json"
TARGET_FORMATS = {"json", "text"}

_CONFIG_KEYS = {"authority", "targets"}
_TARGET_KEYS = {"path", "format", "label"}


@dataclass
class TargetSpec:
    path: Path
    format: str                                     # json | text
    label: str = ""

    def __post_init__(self) -> None:
        if not self.label:
            self.label = self.path.name


@dataclass
class SyncConfig:
    root: Path
    authority: Path
    targets: list[TargetSpec] = field(default_factory=list)


def default_targets(root: Path) -> list[TargetSpec]:
    """The Tauri layout: tauri.conf.json plus the crate's Cargo.toml."""
    return [
        TargetSpec(root / "src-tauri" / "tauri.conf.json", "json"),
        TargetSpec(root / "src-tauri" / "Cargo.toml", "text"),
    ]


def resolve_root(cli_root: Path | None = None, default_root: Path | None = None) -> Path:
    """Pick the project root and check that it is a directory."""
    env_root = os.getenv(ROOT_ENV_VAR, "").strip()
    if cli_root is not None:
        root = cli_root
    elif env_root:
        root = Path(env_root)
    elif default_root is not None:
        root = default_root
    else:
        root = Path.cwd()

    root = root.expanduser().resolve()
    if not root.is_dir():
        raise InputError(f"Project root is not a directory: {root}")
    _log.debug("root_resolved", extra={"root": str(root)})
    return root


def load_config(root: Path, config_path: Path | None = None) -> SyncConfig:
    """Build the sync configuration for a root.

    An explicit config_path must exist. Without one, .version-sync.yaml at
    the root is used when present, otherwise the built-in defaults.
    """
    if config_path is None:
        candidate = root / CONFIG_FILENAME
        if not candidate.is_file():
            _log.debug("config_default")
            return SyncConfig(
                root=root,
                authority=root / DEFAULT_AUTHORITY,
                targets=default_targets(root),
            )
        config_path = candidate
    elif not config_path.is_absolute():
        config_path = Path.cwd() / config_path

    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise InputError(f"Unable to read config: {config_path}") from exc

    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise InputError(f"Invalid config YAML at {config_path}: {exc}") from exc

    _log.debug("config_read", extra={"config_path": str(config_path)})
    return parse_config(raw if raw is not None else {}, root, source=str(config_path))


def parse_config(raw: Any, root: Path, *, source: str = "config") -> SyncConfig:
    """Validate a parsed config mapping and turn it into a SyncConfig."""
    if not isinstance(raw, dict):
        raise InputError(f"{source}: top level must be a mapping")

    unknown = sorted(set(raw) - _CONFIG_KEYS)
    if unknown:
        raise InputError(f"{source}: unknown keys: {', '.join(unknown)}")

    authority_raw = raw.get("authority", DEFAULT_AUTHORITY)
    if not isinstance(authority_raw, str) or not authority_raw.strip():
        raise InputError(f"{source}: authority must be a non-empty path")

    if "targets" not in raw:
        targets = default_targets(root)
    else:
        entries = raw["targets"]
        if not isinstance(entries, list) or not entries:
            raise InputError(f"{source}: targets must be a non-empty list")
        targets = [_parse_target(entry, root, source, i) for i, entry in enumerate(entries)]

    return SyncConfig(
        root=root,
        authority=_under_root(root, authority_raw),
        targets=targets,
    )


def _parse_target(entry: Any, root: Path, source: str, index: int) -> TargetSpec:
    where = f"{source}: targets[{index}]"
    if not isinstance(entry, dict):
        raise InputError(f"{where} must be a mapping with path and format")

    unknown = sorted(set(entry) - _TARGET_KEYS)
    if unknown:
        raise InputError(f"{where}: unknown keys: {', '.join(unknown)}")

    path = entry.get("path")
    if not isinstance(path, str) or not path.strip():
        raise InputError(f"{where}: path is required")

    fmt = entry.get("format")
    if fmt not in TARGET_FORMATS:
        raise InputError(
            f"{where}: format must be one of {', '.join(sorted(TARGET_FORMATS))}, got {fmt!r}"
        )

    label = entry.get("label") or ""
    return TargetSpec(_under_root(root, path), fmt, str(label))


def _under_root(root: Path, value: str) -> Path:
    path = Path(value).expanduser()
    return path if path.is_absolute() else root / path
