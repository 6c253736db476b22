"""version-sync exception hierarchy.

Two categories for quick error triage:

    InputError       — missing file, malformed JSON/YAML, missing version field
    IntegrationError — failure writing a target back to disk

All inherit from VersionSyncError for a single catch-all if needed.
"""

from __future__ import annotations


class VersionSyncError(Exception):
    """Base class for all version-sync errors."""

    category: str = "unknown"


class InputError(VersionSyncError):
    """Bad project input: missing file, malformed document, no version to sync."""

    category = "input"


class IntegrationError(VersionSyncError):
    """External I/O failure while writing a target file."""

    category = "integration"
