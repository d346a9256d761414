# main.py

"""Entry point for the shopfront client (TUI or headless CLI)."""

import argparse
import asyncio
import getpass
import logging
import os
import sys

from shopfront.config.logging_config import setup_logging
from shopfront.services.shop_client import ShopClient
from shopfront.storage.token_store import MemoryStore

logger = logging.getLogger("shopfront.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="shopfront",
        description="Catalog browser and cart for the demo shop API.",
        epilog="Run without arguments to launch the interactive TUI.",
    )
    action = parser.add_mutually_exclusive_group()
    action.add_argument(
        "--products",
        action="store_true",
        default=False,
        help="List products (combine with --category or --search).",
    )
    action.add_argument(
        "--product",
        type=int,
        default=None,
        metavar="ID",
        help="Show a single product.",
    )
    action.add_argument(
        "--categories",
        action="store_true",
        default=False,
        help="List product categories.",
    )
    action.add_argument(
        "--login",
        default=None,
        metavar="USER",
        help="Log in (password from SHOPFRONT_PASSWORD or a prompt).",
    )
    action.add_argument(
        "--logout",
        action="store_true",
        default=False,
        help="Forget the stored session.",
    )
    action.add_argument(
        "--status",
        action="store_true",
        default=False,
        help="Report whether a session is stored.",
    )
    action.add_argument(
        "--health",
        action="store_true",
        default=False,
        help="Run a connectivity health check on the API.",
    )
    parser.add_argument(
        "-c",
        "--category",
        default=None,
        help="Category slug for --products.",
    )
    parser.add_argument(
        "-q",
        "--search",
        default=None,
        help="Search query for --products.",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "--ephemeral",
        action="store_true",
        default=False,
        help="Keep the session in memory only.",
    )
    return parser


def _is_headless(args: argparse.Namespace) -> bool:
    return bool(
        args.products
        or args.product is not None
        or args.categories
        or args.login
        or args.logout
        or args.status
        or args.health
        or args.category
        or args.search
    )


def _run_tui(client: ShopClient) -> None:
    """Launch the interactive Textual TUI."""
    from shopfront.ui.app import ShopfrontApp

    try:
        app = ShopfrontApp(client)
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("shopfront TUI shutting down")


async def _run_cli(client: ShopClient, args: argparse.Namespace) -> int:
    """Run one headless command and return its exit code."""
    from shopfront.cli import runner

    fmt = args.output_format
    if args.health:
        return await runner.run_health_check(client)
    if args.login:
        password = os.getenv("SHOPFRONT_PASSWORD") or getpass.getpass()
        return await runner.cli_login(client, args.login, password)
    if args.logout:
        return await runner.cli_logout(client)
    if args.status:
        return await runner.cli_status(client)
    if args.categories:
        return await runner.cli_categories(client, fmt)
    if args.product is not None:
        return await runner.cli_product(client, args.product, fmt)
    return await runner.cli_products(
        client, args.category, args.search, fmt
    )


def main() -> None:
    """Route to TUI (no args) or a headless command."""
    log_file = setup_logging()
    logger.info("shopfront starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()

    client = ShopClient(store=MemoryStore() if args.ephemeral else None)
    try:
        if not _is_headless(args):
            _run_tui(client)
            return
        exit_code = asyncio.run(_run_cli(client, args))
    finally:
        client.close()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
