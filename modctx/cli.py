"""
modctx CLI: Command-line interface for context snapshots and activation.

Provides commands for:
- new: Snapshot the current module set into a context manifest
- set: Install a context's modules and start a session with them
- show: Print a context manifest
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from modctx.config import ContextConfig
from modctx.errors import ContextError


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="modctx",
        description="modctx: Reproducible module contexts",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--config-dir",
        help="Directory to start the .modctx.toml search from (default: cwd)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    new_parser = subparsers.add_parser(
        "new",
        help="Snapshot loaded and materialized modules into a manifest",
    )
    new_parser.add_argument("root", help="Context root directory")

    set_parser = subparsers.add_parser(
        "set",
        help="Install a context's modules and start a session",
    )
    set_parser.add_argument("root", help="Context root directory")
    set_parser.add_argument(
        "--no-launch",
        action="store_true",
        help="Install modules but do not start a session",
    )

    show_parser = subparsers.add_parser(
        "show",
        help="Print a context manifest",
    )
    show_parser.add_argument("root", help="Context root directory")
    show_parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output as JSON",
    )

    args = parser.parse_args(argv)

    # Setup logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    config = ContextConfig.load(Path(args.config_dir) if args.config_dir else None)

    try:
        if args.command == "new":
            return handle_new(args, config)
        elif args.command == "set":
            return handle_set(args, config)
        elif args.command == "show":
            return handle_show(args, config)
    except (ContextError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    parser.print_help()
    return 0


def handle_new(args: argparse.Namespace, config: ContextConfig) -> int:
    """Handle the new command."""
    from modctx.registry import create_registry
    from modctx.snapshot import new_context

    manifest = new_context(Path(args.root), create_registry(config), config)
    print(f"Context {manifest.name} {manifest.version}: {len(manifest.modules)} modules")
    return 0


def handle_set(args: argparse.Namespace, config: ContextConfig) -> int:
    """Handle the set command."""
    from modctx.activate import set_context
    from modctx.launcher import LauncherRegistry
    from modctx.registry import create_registry

    launcher = None
    if not args.no_launch:
        launcher = LauncherRegistry.create(executable=config.runtime.executable)

    environment = set_context(
        Path(args.root),
        create_registry(config),
        launcher=launcher,
        config=config,
    )
    if args.no_launch:
        print(f"{environment.variable}={environment.module_path}")
    return 0


def handle_show(args: argparse.Namespace, config: ContextConfig) -> int:
    """Handle the show command."""
    from modctx.manifest import ContextManifest

    layout = config.context.layout(Path(args.root))
    path = layout.manifest_path()
    if not path.exists():
        print(f"No manifest at {path}", file=sys.stderr)
        return 1

    manifest = ContextManifest.load(path)
    if args.json_output:
        print(json.dumps(manifest.to_dict(), indent=2))
        return 0

    table = Table(title=f"{manifest.name} {manifest.version}")
    table.add_column("Module", style="cyan")
    table.add_column("Version")
    table.add_column("Condition", style="dim")
    for ref in manifest.modules:
        table.add_row(ref.name, ref.version, ref.condition.value)
    Console().print(table)
    return 0


if __name__ == "__main__":
    sys.exit(main())
