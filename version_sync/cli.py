"""Command-line entrypoint for version-sync."""

from __future__ import annotations

import argparse
import sys
import textwrap
from pathlib import Path

from . import __version__
from .config import ROOT_ENV_VAR, load_config, resolve_root
from .exceptions import VersionSyncError
from .log import configure_logging, get_logger
from .sync import COMPLETION_NOTICE, apply_sync, display_value, plan_sync, report_lines


def cmd_sync(args: argparse.Namespace, default_root: Path | None = None) -> int:
    """Sync (or, with --dry-run, preview) every target."""
    root = resolve_root(args.root, default_root)
    config = load_config(root, args.config)
    plan = plan_sync(config)

    lines = report_lines(plan)
    print(lines[0])
    if args.dry_run:
        for line in lines[1:]:
            print(f"{line} (dry run)")
        print("\nDry run: no files written.")
        return 0

    apply_sync(plan)
    for line in lines[1:]:
        print(line)
    print(f"\n{COMPLETION_NOTICE}")
    return 0


def cmd_check(args: argparse.Namespace, default_root: Path | None = None) -> int:
    """Report targets whose version differs from the authority. Writes nothing."""
    root = resolve_root(args.root, default_root)
    config = load_config(root, args.config)
    plan = plan_sync(config)

    print(f"Current version: {plan.version}")
    drifted = plan.drifted
    for change in plan.changes:
        marker = "ok" if change.in_sync else "out of sync"
        print(f"{change.label}: {display_value(change.old_version)} ({marker})")

    if drifted:
        print(f"\n{len(drifted)} target(s) out of sync. Run `version-sync` to update.")
        return 1
    print("\nAll targets in sync.")
    return 0


def main(argv: list[str] | None = None, *, default_root: Path | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="version-sync",
        description="Copy the authority file's version into every target file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent(
            f"""\
            Examples:
              version-sync
              version-sync --root path/to/project
              version-sync --check
              version-sync --dry-run --config release/version-sync.yaml

            The project root defaults to ${ROOT_ENV_VAR}, else the current directory.
            """
        ),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument("--root", type=Path, default=None, help="Project root directory")
    parser.add_argument(
        "--config", type=Path, default=None,
        help="YAML config listing authority and targets (default: <root>/.version-sync.yaml)",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--dry-run", action="store_true", help="Show changes without writing")
    mode.add_argument(
        "--check", action="store_true",
        help="Exit 1 if any target is out of sync; write nothing",
    )

    args = parser.parse_args(argv)

    log_mode = "check" if args.check else "dry-run" if args.dry_run else "sync"
    configure_logging(mode=log_mode)
    _log = get_logger("cli")
    _log.debug("invocation")

    command = cmd_check if args.check else cmd_sync
    try:
        return command(args, default_root)
    except VersionSyncError as exc:
        print(f"Error [{exc.category}]: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
