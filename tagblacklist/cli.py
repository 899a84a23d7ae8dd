#!/usr/bin/env python3
"""Command-line interface for tagblacklist.

This module provides the CLI for managing blacklists and applying them to
a set of content items:
- Argument parsing and validation
- Configuration file loading
- Blacklist store management (list, show, set, remove)
- Applying a blacklist to items loaded from a YAML/JSON file

Example:
    >>> from tagblacklist.cli import main
    >>> main(["apply", "--items", "posts.yaml", "--blacklist", "Safe mode"])
    0
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from tagblacklist.core.cache import CacheConfig
from tagblacklist.core.config import ConfigManager, ConfigSource
from tagblacklist.core.constants import TAGBLACKLIST_VERSION, TagBlacklistError
from tagblacklist.core.logging import Logger, LogLevel, set_global_logger
from tagblacklist.items import CachedItemProvider, StaticItemProvider, normalize_item_id
from tagblacklist.manager import BlacklistManager
from tagblacklist.report import render_rules, render_text, render_yaml
from tagblacklist.rules.parser import RuleParser
from tagblacklist.store import BlacklistStore, YamlBlacklistStore

DESCRIPTION = "tagblacklist - filter tagged content with wildcard blacklists"


class CLIError(TagBlacklistError):
    """Exception raised for CLI-related errors."""


def parse_arguments(args: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        args: Argument list to parse (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace

    Raises:
        SystemExit: On invalid arguments or --help/--version
        CLIError: If argument values fail validation
    """
    parser = argparse.ArgumentParser(
        prog="tagblacklist",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List stored blacklists
  tagblacklist list

  # Create or replace a blacklist from a file
  tagblacklist set "Work" --file work.txt

  # Apply a blacklist to items and print the sidebar summary
  tagblacklist apply --items posts.yaml --blacklist "Safe mode"

  # Apply to selected ids and print YAML
  tagblacklist apply --items posts.yaml --ids 12 34 --format yaml
        """,
    )

    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {TAGBLACKLIST_VERSION}",
    )
    parser.add_argument(
        "-c",
        "--config",
        metavar="FILE",
        type=str,
        help="Configuration file path (YAML format)",
    )
    parser.add_argument(
        "-s",
        "--store",
        metavar="FILE",
        type=str,
        help="Blacklist store file (overrides tagblacklist.store.path)",
    )

    log_group = parser.add_argument_group("logging options")
    log_group.add_argument("--debug", action="store_true", help="Enable debug logging")
    log_group.add_argument("--log-file", metavar="FILE", type=str, help="Also log to FILE")

    commands = parser.add_subparsers(dest="command", metavar="COMMAND")
    commands.required = True

    commands.add_parser("list", help="List stored blacklists")

    show = commands.add_parser("show", help="Show the parsed rules of a blacklist")
    show.add_argument("name", help="Blacklist name")

    set_cmd = commands.add_parser("set", help="Create or replace a blacklist")
    set_cmd.add_argument("name", help="Blacklist name")
    source = set_cmd.add_mutually_exclusive_group(required=True)
    source.add_argument("--text", help="Blacklist text (use \\n between rules)")
    source.add_argument("--file", metavar="FILE", help="Read blacklist text from FILE")

    remove = commands.add_parser("remove", help="Remove a blacklist")
    remove.add_argument("name", help="Blacklist name")

    apply_cmd = commands.add_parser("apply", help="Apply a blacklist to content items")
    apply_cmd.add_argument(
        "-i", "--items", metavar="FILE", required=True, help="Items file (YAML or JSON)"
    )
    apply_cmd.add_argument(
        "-b", "--blacklist", metavar="NAME", help="Blacklist to apply (default: configured or first)"
    )
    apply_cmd.add_argument(
        "--ids", metavar="ID", nargs="+", help="Only evaluate these ids (default: all items)"
    )
    apply_cmd.add_argument(
        "--disable",
        metavar="INDEX",
        type=int,
        action="append",
        default=[],
        help="Disable the rule at INDEX (can be specified multiple times)",
    )
    apply_cmd.add_argument(
        "-f", "--format", choices=["text", "yaml"], default="text", help="Output format"
    )

    parsed = parser.parse_args(args)
    _validate_arguments(parsed)
    return parsed


def _validate_arguments(args: argparse.Namespace) -> None:
    """
    Validate parsed arguments.

    Raises:
        CLIError: If validation fails
    """
    if args.config and not Path(args.config).expanduser().is_file():
        raise CLIError(f"Configuration file does not exist: {args.config}")

    if getattr(args, "file", None) and not Path(args.file).expanduser().is_file():
        raise CLIError(f"Blacklist file does not exist: {args.file}")

    if getattr(args, "items", None) and not Path(args.items).expanduser().is_file():
        raise CLIError(f"Items file does not exist: {args.items}")


def build_config(args: argparse.Namespace) -> ConfigManager:
    """
    Build configuration from file, environment and arguments.

    Command-line arguments take precedence over the environment, which
    takes precedence over the configuration file.
    """
    config = ConfigManager(args.config)

    if args.store:
        config.set("tagblacklist.store.path", args.store, ConfigSource.CLI_ARGS)
    if args.debug:
        config.set("tagblacklist.logging.level", "DEBUG", ConfigSource.CLI_ARGS)
    if args.log_file:
        config.set("tagblacklist.logging.file", args.log_file, ConfigSource.CLI_ARGS)

    return config


def setup_logging(config: ConfigManager) -> Logger:
    """Create the package logger from configuration."""
    level = config.get("tagblacklist.logging.level", "INFO")
    try:
        LogLevel.coerce(level)
    except (KeyError, ValueError):
        raise CLIError(f"Unknown log level: {level}")

    logger = Logger("tagblacklist", level=level)
    log_file = config.get("tagblacklist.logging.file")
    if log_file:
        logger.add_handler(logger.create_file_handler(log_file))

    set_global_logger(logger)
    return logger


def open_store(config: ConfigManager) -> BlacklistStore:
    return YamlBlacklistStore(config.get("tagblacklist.store.path"))


def cmd_list(args: argparse.Namespace, config: ConfigManager, logger: Logger) -> int:
    store = open_store(config)
    default = config.get("tagblacklist.blacklist.default")
    for item in store.items():
        marker = "*" if item.name == default else " "
        rules = len(RuleParser(logger).parse(item.value))
        print(f"{marker} {item.name} ({rules} rules)")
    return 0


def cmd_show(args: argparse.Namespace, config: ConfigManager, logger: Logger) -> int:
    item = open_store(config).get(args.name)
    print(render_rules(RuleParser(logger).parse(item.value, name=item.name)))
    return 0


def cmd_set(args: argparse.Namespace, config: ConfigManager, logger: Logger) -> int:
    if args.file:
        text = Path(args.file).expanduser().read_text(encoding="utf-8")
    else:
        text = args.text.replace("\\n", "\n")

    store = open_store(config)
    manager = BlacklistManager(store, StaticItemProvider().fetch_item, logger)
    manager.update_blacklist(args.name, text)
    logger.info("Stored blacklist", blacklist=args.name)
    return 0


def cmd_remove(args: argparse.Namespace, config: ConfigManager, logger: Logger) -> int:
    store = open_store(config)
    manager = BlacklistManager(store, StaticItemProvider().fetch_item, logger)
    manager.remove_blacklist(args.name)
    logger.info("Removed blacklist", blacklist=args.name)
    return 0


def cmd_apply(args: argparse.Namespace, config: ConfigManager, logger: Logger) -> int:
    items = StaticItemProvider.from_file(args.items)
    provider = CachedItemProvider(
        items.fetch_item,
        CacheConfig(
            max_entries=int(config.get("tagblacklist.cache.max_entries")),
            ttl_seconds=float(config.get("tagblacklist.cache.ttl_seconds")),
            enabled=bool(config.get("tagblacklist.cache.enabled", True)),
        ),
    )

    manager = BlacklistManager(open_store(config), provider.fetch_item, logger)
    if args.blacklist:
        manager.select(args.blacklist)
    elif manager.select_default(config.get("tagblacklist.blacklist.default")) is None:
        raise CLIError("There is no blacklists")

    for index in args.disable:
        try:
            manager.set_rule_disabled(index, True)
        except IndexError:
            raise CLIError(f"No rule at index {index} in {manager.selected_name}")

    ids = [normalize_item_id(i) for i in args.ids] if args.ids else items.ids()
    result = asyncio.run(manager.apply(ids))
    if result is None:
        raise CLIError("Blacklist selection changed during evaluation")

    if args.format == "yaml":
        print(render_yaml(result), end="")
    else:
        print(render_text(result, manager.blacklist_names(), manager.selected_name))
    return 0


COMMANDS = {
    "list": cmd_list,
    "show": cmd_show,
    "set": cmd_set,
    "remove": cmd_remove,
    "apply": cmd_apply,
}


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Exit code (0 success, 1 error, 130 interrupted)
    """
    try:
        args = parse_arguments(argv)
        config = build_config(args)
        logger = setup_logging(config)
        return COMMANDS[args.command](args, config, logger)

    except TagBlacklistError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
