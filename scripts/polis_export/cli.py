"""Command-line interface for the Polis conversation exporter."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from datetime import datetime
from pathlib import Path

from .exceptions import PolisExportError
from .exporter import QuoteStyle
from .extractor import run_export
from .schema import DEFAULT_DATABASE_URL


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Export votes, comments and identity crosswalk for a Polis conversation",
        epilog="""
Examples:
  %(prog)s output/ --zid 12
  %(prog)s output/ --zid 12 --database-url postgresql://postgres@localhost:5431/polis-dev
  %(prog)s output/ --zid 12 --escape-quotes --no-groups
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "output_dir",
        type=Path,
        help="Output directory for CSV artifacts",
    )
    parser.add_argument(
        "--zid",
        type=int,
        required=True,
        help="Conversation id to export",
    )
    parser.add_argument(
        "--database-url",
        type=str,
        dest="database_url",
        default=os.environ.get("DATABASE_URL", DEFAULT_DATABASE_URL),
        help=f"PostgreSQL connection URL (default: $DATABASE_URL or {DEFAULT_DATABASE_URL})",
    )
    parser.add_argument(
        "--escape-quotes",
        action="store_true",
        dest="escape_quotes",
        help="Double embedded quotes in text columns (RFC 4180)",
    )
    parser.add_argument(
        "--no-groups",
        action="store_true",
        dest="no_groups",
        help="Skip writing groups.csv",
    )
    parser.add_argument(
        "--no-validate",
        action="store_true",
        dest="no_validate",
        help="Skip validation (not recommended)",
    )
    parser.add_argument(
        "--sample-size",
        type=int,
        default=100,
        dest="sample_size",
        help="Sample size for crosswalk validation (default: 100)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every unresolved identifier",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    print(f"[{datetime.now().isoformat()}] Exporting conversation {args.zid}")

    try:
        result = run_export(
            args.database_url,
            args.zid,
            args.output_dir,
            quote_style=QuoteStyle.ESCAPED if args.escape_quotes else QuoteStyle.LEGACY,
            include_groups=not args.no_groups,
            validate=not args.no_validate,
            sample_size=args.sample_size,
        )

        print(f"\n[{datetime.now().isoformat()}] SUCCESS")
        print(f"  Output: {result.output_dir}")
        print(f"  Votes: {result.votes_written:,} written, {result.votes_dropped:,} dropped")
        print(f"  Comments: {result.comment_count:,}")
        print(f"  Crosswalk: {result.crosswalk_count:,} of {result.participant_count:,} participants")
        if result.participant_count > 0:
            pct = result.crosswalk_count / result.participant_count * 100
            print(f"  Resolved participants: {pct:.1f}%")
        print(f"  Active authors: {result.active_author_count:,}")
        if result.groups_path is not None:
            print(
                f"  Group members: {result.group_member_count:,} "
                f"({result.group_members_unresolved:,} unresolved)"
            )

        if args.no_validate:
            print("  Validation: SKIPPED")
        else:
            print("  Validation: ALL PASSED")

        return 0

    except PolisExportError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
