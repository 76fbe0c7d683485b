#!/usr/bin/env python3
"""
ledgerctl - Inventory Ledger operational CLI

Operates directly on a SQLite ledger database as the principal given by
--owner:
- Item operations (ledgerctl add / update / remove / list / get)
- Global bounds (ledgerctl limits)
- Health checks (ledgerctl doctor)
- Version info (ledgerctl version)
"""

import argparse
import asyncio
import json
import logging
import os
import sqlite3
import sys
from typing import Optional

import httpx

from inventory_ledger import __version__
from inventory_ledger.config import get_config
from inventory_ledger.inventory import InventoryError, LedgerService
from inventory_ledger.inventory.backends import read_limits_readonly
from inventory_ledger.inventory.service import build_service


class Colors:
    """ANSI color codes for terminal output."""
    
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    RED = "\033[91m"
    RESET = "\033[0m"
    BOLD = "\033[1m"


def colorize(text: str, color: str) -> str:
    """Colorize text if stdout is a TTY."""
    if sys.stdout.isatty():
        return f"{color}{text}{Colors.RESET}"
    return text


def resolve_db_path(args) -> Optional[str]:
    """Database path from --db, falling back to LEDGER_DB_PATH."""
    return args.db or get_config().db_path


def open_service(db_path: str) -> LedgerService:
    """Build a service backed by the SQLite database at db_path."""
    config = get_config().model_copy(update={"db_path": db_path})
    return build_service(config)


def require_owner(args) -> str:
    if not args.owner:
        raise SystemExit(
            colorize("--owner (or LEDGER_OWNER) is required for this command", Colors.RED)
        )
    return args.owner


def print_json(data) -> None:
    print(json.dumps(data, indent=2))


def cmd_add(service: LedgerService, args) -> int:
    item_id = service.add_item(require_owner(args), args.name, args.quantity, args.price)
    print_json({"item_id": item_id})
    return 0


def cmd_update(service: LedgerService, args) -> int:
    item = service.update_item(require_owner(args), args.item_id, args.quantity, args.status)
    print_json(item.model_dump())
    return 0


def cmd_remove(service: LedgerService, args) -> int:
    service.remove_item(require_owner(args), args.item_id)
    print(colorize(f"✓ Removed item {args.item_id}", Colors.GREEN))
    return 0


def cmd_list(service: LedgerService, args) -> int:
    items = service.get_inventory(require_owner(args))
    if args.live:
        print_json({str(i): item.model_dump() for i, item in enumerate(items) if item.is_live})
    else:
        print_json([item.model_dump() for item in items])
    return 0


def cmd_get(service: LedgerService, args) -> int:
    print_json(service.get_item(args.item_owner, args.item_id).model_dump())
    return 0


def cmd_limits(service: LedgerService, args) -> int:
    if args.set:
        limits = service.set_limits(*args.set)
    else:
        limits = service.get_limits()
    print_json(limits.model_dump())
    return 0


COMMANDS = {
    "add": cmd_add,
    "update": cmd_update,
    "remove": cmd_remove,
    "list": cmd_list,
    "get": cmd_get,
    "limits": cmd_limits,
}


def check_database(db_path: Optional[str]) -> tuple[str, str]:
    """
    Check that the ledger database opens and has limits installed.
    
    The file is opened read-only; the check never creates tables.
    
    Returns:
        (status, message) where status is "OK", "WARN", or "ERROR"
    """
    if not db_path:
        return "WARN", "No database configured (use --db or LEDGER_DB_PATH)"

    if not os.path.exists(db_path):
        return "WARN", "Database file does not exist yet (created on first write)"

    try:
        limits = read_limits_readonly(db_path)
    except sqlite3.OperationalError as e:
        return "WARN", f"Database has no ledger tables yet ({e})"
    except Exception as e:
        return "ERROR", f"Cannot open database: {e}"

    if limits is None:
        return "WARN", "Database has no limits installed yet"
    return "OK", f"max_quantity={limits.max_quantity}, max_price={limits.max_price}"


async def check_api(api_url: Optional[str], timeout: float = 5.0) -> tuple[str, str]:
    """
    Check if the ledger HTTP API is reachable and healthy.
    
    Returns:
        (status, message) where status is "OK", "WARN", or "ERROR"
    """
    if not api_url:
        return "WARN", "API URL not configured (--api-url or LEDGER_API_URL)"

    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.get(f"{api_url}/health")
            if response.status_code == 200:
                return "OK", "API is healthy"
            else:
                return "WARN", f"API returned status {response.status_code}"
    except httpx.ConnectError:
        return "ERROR", "Cannot connect to API (connection refused)"
    except httpx.TimeoutException:
        return "ERROR", "API connection timeout"
    except Exception as e:
        return "ERROR", f"Unexpected error: {e}"


def format_check_result(name: str, status: str, message: str, width: int = 40) -> str:
    """Format a check result line."""
    padding = " " * max(1, width - len(name))
    
    if status == "OK":
        status_str = colorize("[OK]", Colors.GREEN)
    elif status == "WARN":
        status_str = colorize("[WARN]", Colors.YELLOW)
    else:  # ERROR
        status_str = colorize("[ERROR]", Colors.RED)
    
    return f"{name}:{padding}{status_str} {message}"


async def cmd_doctor(args) -> int:
    """
    Run health checks and print a summary.
    
    Returns:
        Exit code (0 on success, non-zero on critical failure)
    """
    print(colorize("\nInventory Ledger Doctor", Colors.BOLD))
    print(colorize("=" * 60, Colors.BOLD))
    print()

    db_path = resolve_db_path(args)
    api_url = args.api_url or os.getenv("LEDGER_API_URL")

    all_ok = True

    status, message = check_database(db_path)
    print(format_check_result(f"Database ({db_path or 'not set'})", status, message))
    if status == "ERROR":
        all_ok = False

    status, message = await check_api(api_url, timeout=args.timeout)
    print(format_check_result(f"API ({api_url or 'not set'})", status, message))
    if status == "ERROR":
        all_ok = False

    print()

    if all_ok:
        print(colorize("✓ All critical checks passed", Colors.GREEN))
        return 0
    else:
        print(colorize("✗ One or more critical checks failed", Colors.RED))
        return 1


def cmd_version(args) -> int:
    """
    Print version information.
    
    Returns:
        Exit code (always 0)
    """
    print(f"ledgerctl version {__version__}")
    print("Inventory Ledger - per-owner inventory bookkeeping")
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for ledgerctl."""
    parser = argparse.ArgumentParser(
        description="Inventory Ledger operational CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  ledgerctl --owner 0xabc add widget 10 5      # Add an item, prints its id
  ledgerctl --owner 0xabc update 0 3 reserved  # Change quantity and status
  ledgerctl --owner 0xabc list --live          # Show live items only
  ledgerctl get 0xabc 0                        # Read any owner's item
  ledgerctl limits --set 500 1000              # Replace global bounds
  ledgerctl doctor                             # Run health checks

Environment variables:
  LEDGER_DB_PATH                     # SQLite database path
  LEDGER_OWNER                       # Default --owner
  LEDGER_API_URL                     # API URL checked by doctor (optional)
        """
    )
    parser.add_argument("--db", help="SQLite database path (default: LEDGER_DB_PATH)")
    parser.add_argument(
        "--owner",
        default=os.getenv("LEDGER_OWNER"),
        help="Principal to act as (default: LEDGER_OWNER)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    add_parser = subparsers.add_parser("add", help="Add an item to the owner's inventory")
    add_parser.add_argument("name")
    add_parser.add_argument("quantity", type=int)
    add_parser.add_argument("price", type=int)

    update_parser = subparsers.add_parser("update", help="Update quantity and status of an item")
    update_parser.add_argument("item_id", type=int)
    update_parser.add_argument("quantity", type=int)
    update_parser.add_argument("status")

    remove_parser = subparsers.add_parser("remove", help="Remove an item")
    remove_parser.add_argument("item_id", type=int)

    list_parser = subparsers.add_parser("list", help="List the owner's inventory")
    list_parser.add_argument(
        "--live",
        action="store_true",
        help="Only show items that have not been removed, keyed by id",
    )

    get_parser = subparsers.add_parser("get", help="Read one item of any owner")
    get_parser.add_argument("item_owner", metavar="owner")
    get_parser.add_argument("item_id", type=int)

    limits_parser = subparsers.add_parser("limits", help="Show or replace the global bounds")
    limits_parser.add_argument(
        "--set",
        nargs=2,
        type=int,
        metavar=("MAX_QUANTITY", "MAX_PRICE"),
        help="Replace the bounds",
    )

    doctor_parser = subparsers.add_parser(
        "doctor",
        help="Run health checks and diagnostics"
    )
    doctor_parser.add_argument("--api-url", help="Ledger API base URL to check")
    doctor_parser.add_argument(
        "--timeout",
        type=float,
        default=10.0,
        help="Timeout for HTTP requests in seconds (default: 10.0)"
    )

    subparsers.add_parser(
        "version",
        help="Show version information"
    )

    return parser


def main(argv=None):
    """Main entry point for ledgerctl CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level="DEBUG" if args.verbose else "WARNING",
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 0

    if args.command == "doctor":
        return asyncio.run(cmd_doctor(args))
    if args.command == "version":
        return cmd_version(args)

    handler = COMMANDS.get(args.command)
    if handler is None:
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1

    db_path = resolve_db_path(args)
    if not db_path:
        print(colorize("✗ No database configured (use --db or LEDGER_DB_PATH)", Colors.RED), file=sys.stderr)
        return 2

    try:
        return handler(open_service(db_path), args)
    except InventoryError as e:
        print(colorize(f"✗ {e.code}: {e}", Colors.RED), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
