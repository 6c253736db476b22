"""Plan, apply and report one version synchronization.

Planning reads the authority and every target and computes the rewritten
text in memory. Any problem (missing file, bad document, no version field,
no version line) raises before apply_sync() opens a single file for writing.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .config import SyncConfig, TargetSpec
from .documents import read_authority_version, read_text, write_text
from .log import get_logger
from .patchers import format_version_line, patch_json_document, patch_version_line

_log = get_logger("sync")

COMPLETION_NOTICE = "Version sync complete!"


@dataclass
class TargetChange:
    label: str
    path: Path
    format: str                                     # json | text
    old_version: Any                                # value found in the target
    new_version: str
    old_display: str                                # left side of the report line
    new_display: str                                # right side of the report line
    old_text: str
    new_text: str

    @property
    def in_sync(self) -> bool:
        return self.old_version == self.new_version

    @property
    def report_line(self) -> str:
        return f"{self.label}: {self.old_display} -> {self.new_display}"


@dataclass
class SyncPlan:
    version: str
    authority: Path
    changes: list[TargetChange] = field(default_factory=list)

    @property
    def drifted(self) -> list[TargetChange]:
        return [c for c in self.changes if not c.in_sync]


def plan_sync(config: SyncConfig) -> SyncPlan:
    """Read everything and compute the new target contents without writing."""
    version = read_authority_version(config.authority)
    _log.debug("authority_read", extra={"path": str(config.authority), "version": version})

    plan = SyncPlan(version=version, authority=config.authority)
    for target in config.targets:
        plan.changes.append(plan_target(target, version))
    return plan


def plan_target(target: TargetSpec, version: str) -> TargetChange:
    old_text = read_text(target.path)

    if target.format == "json":
        old_version, new_text = patch_json_document(old_text, version, target.path)
        old_display = display_value(old_version)
        new_display = version
    else:
        # The rewritten line always normalizes spacing, so compare values.
        old_display, old_version, new_text = patch_version_line(old_text, version, target.path)
        new_display = format_version_line(version)

    _log.debug(
        "target_planned",
        extra={"path": str(target.path), "old": old_version, "new": version},
    )
    return TargetChange(
        label=target.label,
        path=target.path,
        format=target.format,
        old_version=old_version,
        new_version=version,
        old_display=old_display,
        new_display=new_display,
        old_text=old_text,
        new_text=new_text,
    )


def apply_sync(plan: SyncPlan) -> None:
    """Write every planned target.

    Targets are rewritten even when already in sync, so a repeated run
    normalizes formatting the same way every time.
    """
    for change in plan.changes:
        write_text(change.path, change.new_text)


def sync(config: SyncConfig) -> SyncPlan:
    plan = plan_sync(config)
    apply_sync(plan)
    return plan


def report_lines(plan: SyncPlan) -> list[str]:
    lines = [f"Current version: {plan.version}"]
    lines.extend(change.report_line for change in plan.changes)
    return lines


def display_value(value: Any) -> str:
    """Render a version as the report shows it: strings bare, anything else as JSON."""
    return value if isinstance(value, str) else json.dumps(value)
