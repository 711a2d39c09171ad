"""Session-specials command line.

Usage examples:
    python -m shopkeep refresh-specials
    python -m shopkeep pricing-table
    python -m shopkeep rotation --period 2026-10 --count 6
    python -m shopkeep show-specials
"""

from __future__ import annotations

import argparse
import logging
import os
import random
from typing import Sequence

from dotenv import load_dotenv

from shopkeep.application.services.monthly_rotation import (
    DEFAULT_ROTATION_SIZE,
    current_period,
    monthly_rotation,
)
from shopkeep.application.services.pricing import (
    CONSUMABLE_PRICING_TABLE,
    PRICING_TABLE,
    format_pricing_table,
    roll_price,
)
from shopkeep.bootstrap import create_curation_service, create_item_library, create_specials_store
from shopkeep.domain.errors import CurationError
from shopkeep.presentation.item_list import format_item_list


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="shopkeep", description="Curate and inspect shop session specials")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("refresh-specials", help="Ask the curator model for new session specials")
    commands.add_parser("pricing-table", help="Print the rarity pricing tables with sample rolls")
    commands.add_parser("show-specials", help="Print the currently stored session specials")

    rotation = commands.add_parser("rotation", help="Print the seeded monthly rotation")
    rotation.add_argument("--period", default=None, help="Calendar period as YYYY-MM (default: this month)")
    rotation.add_argument("--count", type=int, default=DEFAULT_ROTATION_SIZE, help="Number of items")
    return parser


def _configure_logging() -> None:
    level_name = os.getenv("SHOPKEEP_LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _refresh_specials() -> int:
    print("Refreshing session specials via LLM curation...")
    print("This may take a few minutes while the model generates recommendations.")
    print()
    service = None
    try:
        service = create_curation_service()
        result = service.refresh_session_specials()
    except (CurationError, ValueError) as exc:
        print(f"Error: {exc}")
        return 1
    finally:
        close = getattr(getattr(service, "curator_model", None), "close", None)
        if callable(close):
            close()

    print(f"Session specials refreshed! {len(result.entries)} items generated.")
    if result.warnings:
        print(f"{len(result.warnings)} curator picks were dropped during validation.")
    print()
    print(format_item_list(result.entries))
    return 0


def _pricing_table() -> int:
    print(format_pricing_table())
    rng = random.Random()
    print("**Example Price Rolls:**")
    for tier in PRICING_TABLE:
        print(f"{tier.rarity}: {roll_price(tier, rng):,} gp (range: {tier.min:,}-{tier.max:,})")
    print()
    print("**Consumable Price Rolls:**")
    for tier in CONSUMABLE_PRICING_TABLE:
        print(f"{tier.rarity} Potion: {roll_price(tier, rng):,} gp (range: {tier.min:,}-{tier.max:,})")
    return 0


def _rotation(period: str | None, count: int) -> int:
    resolved = period or current_period()
    try:
        pool = create_item_library().load_all()
        entries = monthly_rotation(pool, resolved, count)
    except (CurationError, ValueError) as exc:
        print(f"Error: {exc}")
        return 1
    print(f"Monthly Specials ({resolved})")
    print(format_item_list(entries))
    return 0


def _show_specials() -> int:
    try:
        entries = create_specials_store().read_entries()
    except CurationError as exc:
        print(f"Error: {exc}")
        return 1
    print(format_item_list(entries))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    load_dotenv()
    _configure_logging()
    args = build_parser().parse_args(list(argv) if argv is not None else None)

    if args.command == "refresh-specials":
        return _refresh_specials()
    if args.command == "pricing-table":
        return _pricing_table()
    if args.command == "rotation":
        return _rotation(args.period, args.count)
    return _show_specials()


if __name__ == "__main__":
    raise SystemExit(main())
