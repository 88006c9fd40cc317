#!/usr/bin/env python3
"""
Licence Key Tool - Main Entry Point.

Usage:
    python main.py                      (one key per edition)
    python main.py editions [--no-separators]
    python main.py generate [--edition <name>] [--seats N] [--count N] [options]
    python main.py parse <key>
    python main.py validate <key> [--no-expiry-check]
"""

import argparse
import logging
import sys
from datetime import date, datetime

from config.settings import (
    DEFAULT_EDITION,
    DEFAULT_SEATS,
    KEY_SEPARATORS,
    LOG_FORMAT,
    LOG_LEVEL,
)
from aida64_keys.edition import KeyEdition
from aida64_keys.errors import InvalidKeyError
from aida64_keys.generator import KeyBatchGenerator, KeyRequest
from aida64_keys.license import License, utc_today
from aida64_keys.validator import KeyValidator

EDITION_NAMES = [e.cli_name for e in KeyEdition]


# ============================================================
# Commands
# ============================================================

def cmd_editions(args):
    """Print one generated key per edition."""
    generator = KeyBatchGenerator()
    for edition, key in generator.generate_per_edition(args.separators).items():
        print(f"\"{key}\" -> {edition}")
    return 0


def cmd_generate(args):
    """Generate a batch of distinct keys."""
    request = KeyRequest(
        edition=KeyEdition.from_name(args.edition),
        seats=args.seats,
        purchase_date=args.purchase_date or utc_today(),
        expiry_date=args.expiry_date,
        maintenance_date=args.maintenance_date,
        count=args.count,
        separators=args.separators,
    )
    generator = KeyBatchGenerator()
    for key in generator.generate(request):
        print(key)
    return 0


def cmd_parse(args):
    """Decode a key and print its fields."""
    try:
        lic = License.from_key(args.key)
    except InvalidKeyError as exc:
        print(f"ERROR - {exc}")
        return 1

    expiry = lic.expiry_date.isoformat() if lic.expiry_date else "perpetual"
    print(f"Edition:     {lic.edition}")
    print(f"Seats:       {lic.seats}")
    print(f"Purchased:   {lic.purchase_date.isoformat()}")
    print(f"Expires:     {expiry}")
    print(f"Maintenance: {lic.maintenance_date.isoformat()} ({lic.maintenance_expiry.days} days)")
    print(f"Valid:       {'yes' if lic.is_valid_key() else 'no'}")
    return 0


def cmd_validate(args):
    """Validate a licence key."""
    result = KeyValidator().validate(args.key, check_expiry=args.check_expiry)
    if result.is_valid:
        print(f"VALID - edition: {result.edition}")
        return 0
    print(f"INVALID - {result.error}")
    return 1


# ============================================================
# Helpers
# ============================================================

def _parse_date(date_str: str) -> date:
    """Parse a YYYY-MM-DD date for argparse."""
    try:
        return datetime.strptime(date_str, "%Y-%m-%d").date()
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"invalid date '{date_str}' (expected YYYY-MM-DD)"
        ) from None


# ============================================================
# Parser
# ============================================================

def build_parser():
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="Product licence key generator and checker"
    )
    parser.set_defaults(func=cmd_editions, separators=KEY_SEPARATORS)
    subparsers = parser.add_subparsers(dest="command", help="Command")

    eds = subparsers.add_parser("editions", help="One key for every edition")
    eds.add_argument(
        "--no-separators", dest="separators", action="store_false",
        default=KEY_SEPARATORS,
        help="Print keys without hyphens",
    )
    eds.set_defaults(func=cmd_editions)

    gen = subparsers.add_parser("generate", help="Generate a batch of keys")
    gen.add_argument(
        "--edition",
        choices=EDITION_NAMES,
        default=DEFAULT_EDITION,
        help="Product edition",
    )
    gen.add_argument("--seats", type=int, default=DEFAULT_SEATS, help="Seat count (1-797)")
    gen.add_argument("--purchase-date", type=_parse_date, help="Purchase date (YYYY-MM-DD)")
    gen.add_argument("--expiry-date", type=_parse_date, help="Licence expiry (omit for perpetual)")
    gen.add_argument("--maintenance-date", type=_parse_date, help="Maintenance expiry date")
    gen.add_argument("--count", type=int, default=1, help="Number of distinct keys")
    gen.add_argument(
        "--no-separators", dest="separators", action="store_false",
        default=KEY_SEPARATORS,
        help="Print keys without hyphens",
    )
    gen.set_defaults(func=cmd_generate)

    prs = subparsers.add_parser("parse", help="Decode a licence key")
    prs.add_argument("key", help="Licence key")
    prs.set_defaults(func=cmd_parse)

    val = subparsers.add_parser("validate", help="Validate a licence key")
    val.add_argument("key", help="Licence key")
    val.add_argument(
        "--no-expiry-check", dest="check_expiry", action="store_false",
        help="Accept keys whose licence has expired",
    )
    val.set_defaults(func=cmd_validate)

    return parser


def main(argv=None):
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.func is cmd_generate and args.edition not in EDITION_NAMES:
        parser.error(
            f"invalid edition '{args.edition}' (set KEYGEN_DEFAULT_EDITION to one of: "
            f"{', '.join(EDITION_NAMES)})"
        )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
