#!/usr/bin/env python
"""Inspect or rebuild the restaurant vector index from the shell.

Usage:
    python -m scripts.manage_index status
    python -m scripts.manage_index clear
    python -m scripts.manage_index repopulate

Rebuilds go through the same alias swap as the admin API, so a running
server keeps answering queries from the old collection until the alias
moves.
"""

import argparse
import asyncio
import json
import sys

from restaurant_search.admin.service import AdminService
from restaurant_search.exceptions import RestaurantSearchError
from restaurant_search.factory import build_services
from restaurant_search.logging_config import get_logger, setup_logging

logger = get_logger(__name__)

COMMANDS = ("status", "clear", "repopulate")


async def run_command(command: str, admin: AdminService) -> int:
    """Run one admin command and print its outcome.

    Args:
        command: One of ``status``, ``clear`` or ``repopulate``.
        admin: Admin service to act on.

    Returns:
        Process exit code.
    """
    try:
        if command == "status":
            status = await admin.status()
            print(json.dumps(status.model_dump(by_alias=True), indent=2))
        elif command == "clear":
            print(await admin.clear())
        elif command == "repopulate":
            print(await admin.repopulate())
        else:
            print(f"Unknown command: {command}", file=sys.stderr)
            return 2
    except RestaurantSearchError as e:
        logger.error(
            f"{command} failed: {e.message}",
            extra={"error_code": e.code.value, "details": e.details},
        )
        print(f"ERROR: {e.message}", file=sys.stderr)
        return 1

    return 0


async def _main(command: str) -> int:
    services = await build_services()
    try:
        return await run_command(command, services.admin)
    finally:
        await services.close()


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Manage the restaurant vector index",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "command",
        choices=COMMANDS,
        help="Operation to run against the index",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level",
    )

    args = parser.parse_args(argv)
    setup_logging(level=args.log_level)

    sys.exit(asyncio.run(_main(args.command)))


if __name__ == "__main__":
    main()
