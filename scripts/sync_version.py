#!/usr/bin/env python3
"""
Sync the version from package.json into src-tauri/
===================================================

Zero-argument wrapper for release checklists and `npm run sync-version`:
the project root is the parent of this scripts/ directory, wherever the
command is run from. Any arguments are passed through to version-sync:

    python scripts/sync_version.py
    python scripts/sync_version.py --check
    VERSION_SYNC_ROOT=../other-app python scripts/sync_version.py

The version_sync package must be importable, i.e. installed once with
`pip install -e .` from the repository root. Once installed, package.json
can also call the console script directly:

    "scripts": { "sync-version": "version-sync" }
"""

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent


def main():
    try:
        from version_sync.cli import main as sync_main
    except ImportError:
        print(
            "Error: version_sync is not installed.\n"
            f"Run `pip install -e {REPO_ROOT}` once, then re-run this script.",
            file=sys.stderr,
        )
        sys.exit(1)

    sys.exit(sync_main(sys.argv[1:], default_root=REPO_ROOT))


if __name__ == "__main__":
    main()
