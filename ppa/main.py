#!/usr/bin/env python3
"""Command-line interface for the credential store."""

import argparse
import getpass
import logging
import sys
from pathlib import Path

import pyperclip

from .models import DecodeError, Entry, find_entry, remove_entries, search_entries
from .store import (
    EncryptedStore,
    InitResult,
    NotFoundError,
    StoreError,
    resolve_path,
)


logger = logging.getLogger(__name__)


def setup_logging(debug: bool) -> None:
    """Send diagnostics to stderr, at DEBUG level when --debug is given."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(message)s",
    )


def get_store(store_path: str = None) -> EncryptedStore:
    """Create an EncryptedStore for the given path, or the default one."""
    path = Path(store_path) if store_path else resolve_path()
    logger.debug("Using store at %s", path)
    return EncryptedStore(path)


def prompt_store_password(prompt: str = "Store password: ") -> str:
    """Securely prompt for the store password."""
    return getpass.getpass(prompt)


def print_table(entries: list[Entry]) -> None:
    """Print name, username and comments as aligned columns."""
    headers = ("Name", "Username", "Comments")
    rows = [(entry.name, entry.username, entry.comments) for entry in entries]
    widths = [
        max([len(headers[i])] + [len(row[i]) for row in rows])
        for i in range(len(headers))
    ]

    def line(cells):
        return "  ".join(cell.ljust(width) for cell, width in zip(cells, widths)).rstrip()

    print(line(headers))
    print("  ".join("-" * width for width in widths))
    for row in rows:
        print(line(row))


def cmd_init(args) -> int:
    """Create an empty store."""
    store = get_store(args.store)
    password = prompt_store_password()

    if store.initialize(password) is InitResult.ALREADY_EXISTS:
        print("Store already exists")
    else:
        print(f"Store created at {store.path}")
    return 0


def cmd_add(args) -> int:
    """Add a new entry."""
    store = get_store(args.store)
    store_password = prompt_store_password()
    entries = store.load(store_password)

    logger.debug("Adding new entry")
    password = getpass.getpass("Password: ")
    confirm = getpass.getpass("Confirm password: ")
    if password != confirm:
        print("Error: Passwords do not match.")
        return 1

    entries.append(Entry(
        name=args.name,
        username=args.username,
        password=password,
        comments=args.comments or "",
    ))
    store.save(entries, store_password)
    print("Entry added")
    return 0


def cmd_search(args) -> int:
    """List entries whose name fuzzily matches the search term."""
    store = get_store(args.store)
    entries = store.load(prompt_store_password())

    if not entries:
        print("Store is empty")
        return 0

    matches = search_entries(entries, args.term)
    logger.debug("Found %d matching entries", len(matches))
    if not matches:
        print("No matching entries")
        return 0

    print_table(matches)
    return 0


def cmd_copy(args) -> int:
    """Copy a username or password to the clipboard."""
    store = get_store(args.store)
    entries = store.load(prompt_store_password())

    entry = find_entry(entries, args.name)
    if entry is None:
        print("Could not find matching entry")
        return 0

    pyperclip.copy(getattr(entry, args.what))
    print(f"Copied the {args.what} to your clipboard")
    return 0


def cmd_remove(args) -> int:
    """Remove every entry with the given name."""
    store = get_store(args.store)
    store_password = prompt_store_password()
    entries = store.load(store_password)

    remaining = remove_entries(entries, args.name)
    if len(remaining) == len(entries):
        print("Could not find matching entry")
        return 0

    store.save(remaining, store_password)
    print("Entry removed")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subparser per command."""
    parser = argparse.ArgumentParser(
        prog="ppa",
        description="Command line utility to store and retrieve passwords"
    )

    parser.add_argument(
        "-s", "--store",
        help="Path to store file (default: ~/.ppa.bin)",
        default=None
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(
        title="commands",
        dest="command",
        required=True
    )

    # init command
    init_parser = subparsers.add_parser(
        "init",
        help="Initialize the store"
    )
    init_parser.set_defaults(func=cmd_init)

    # add command
    add_parser = subparsers.add_parser(
        "add",
        help="Add an entry"
    )
    add_parser.add_argument(
        "-n", "--name",
        required=True,
        help="Name of site/service"
    )
    add_parser.add_argument(
        "-u", "--username",
        required=True,
        help="Username"
    )
    add_parser.add_argument(
        "-c", "--comments",
        default=None,
        help="Comments"
    )
    add_parser.set_defaults(func=cmd_add)

    # search command
    search_parser = subparsers.add_parser(
        "search",
        help="Search through stored entries"
    )
    search_parser.add_argument(
        "term",
        nargs="?",
        default=None,
        help="Term to search for; leave blank to list all"
    )
    search_parser.set_defaults(func=cmd_search)

    # copy command
    copy_parser = subparsers.add_parser(
        "copy",
        help="Copy a username or password to your clipboard"
    )
    copy_parser.add_argument(
        "name",
        help="Name of site/service"
    )
    copy_parser.add_argument(
        "what",
        type=str.lower,
        choices=["username", "password"],
        help="What to copy"
    )
    copy_parser.set_defaults(func=cmd_copy)

    # remove command
    remove_parser = subparsers.add_parser(
        "remove",
        help="Remove an entry"
    )
    remove_parser.add_argument(
        "name",
        help="Name of site/service"
    )
    remove_parser.set_defaults(func=cmd_remove)

    return parser


def main(argv=None):
    """Main entry point for the CLI."""
    args = build_parser().parse_args(argv)
    setup_logging(args.debug)

    try:
        sys.exit(args.func(args))
    except KeyboardInterrupt:
        print("\nOperation cancelled.")
        sys.exit(1)
    except NotFoundError as e:
        print(f"Error: {e}. Run 'ppa init' first.")
        sys.exit(1)
    except (StoreError, DecodeError, pyperclip.PyperclipException) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
