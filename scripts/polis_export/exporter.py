"""Write reconciled datasets as comma-delimited artifacts.

Each artifact gets a fixed header and one row per record. Text columns are
wrapped in double quotes. Embedded quotes are NOT escaped by default
(``QuoteStyle.LEGACY``); existing consumers read the files that way.
``QuoteStyle.ESCAPED`` doubles them as in RFC 4180.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from enum import Enum
from pathlib import Path
from typing import Any

from .crosswalk import Crosswalk
from .exceptions import OutputWriteError
from .groups import GroupMembership
from .reconcile import StatementRow, VoteRow
from .schema import (
    COMMENTS_COLUMNS,
    COMMENTS_FILENAME,
    CROSSWALK_COLUMNS,
    CROSSWALK_FILENAME,
    GROUPS_COLUMNS,
    GROUPS_FILENAME,
    TEXT_COLUMNS,
    VOTES_COLUMNS,
    VOTES_FILENAME,
)

logger = logging.getLogger(__name__)


class QuoteStyle(Enum):
    """How embedded double quotes in text columns are written."""

    LEGACY = "legacy"
    ESCAPED = "escaped"


def _format_value(value: Any, quoted: bool, quote_style: QuoteStyle) -> str:
    if value is None:
        text = ""
    elif isinstance(value, bool):
        text = "true" if value else "false"
    else:
        text = str(value)

    if not quoted:
        return text
    if quote_style is QuoteStyle.ESCAPED:
        text = text.replace('"', '""')
    return f'"{text}"'


def write_artifact(
    output_path: Path | str,
    columns: Sequence[str],
    rows: Iterable[Sequence[Any]],
    *,
    quote_style: QuoteStyle = QuoteStyle.LEGACY,
) -> int:
    """
    Write one delimited artifact, replacing any existing file.

    Args:
        output_path: Destination file.
        columns: Header names, in field order.
        rows: Records with fields in the same order as ``columns``.
        quote_style: Quoting rule for text columns.

    Returns:
        Number of data rows written.

    Raises:
        OutputWriteError: If the file cannot be created or written.
    """
    output_path = Path(output_path)
    quoted = [col in TEXT_COLUMNS for col in columns]
    count = 0

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with output_path.open("w", encoding="utf-8", newline="") as f:
            f.write(",".join(columns) + "\n")
            for row in rows:
                fields = (
                    _format_value(value, q, quote_style) for value, q in zip(row, quoted, strict=True)
                )
                f.write(",".join(fields) + "\n")
                count += 1
    except OSError as e:
        raise OutputWriteError(message=str(e), output_path=output_path) from e

    logger.info("Wrote %s rows to %s", f"{count:,}", output_path)
    return count


def write_votes(
    rows: Iterable[VoteRow],
    output_dir: Path,
    *,
    quote_style: QuoteStyle = QuoteStyle.LEGACY,
) -> Path:
    output_path = output_dir / VOTES_FILENAME
    write_artifact(
        output_path,
        VOTES_COLUMNS,
        ((r.statement_id, r.vote, r.external_id) for r in rows),
        quote_style=quote_style,
    )
    return output_path


def write_comments(
    rows: Iterable[StatementRow],
    output_dir: Path,
    *,
    quote_style: QuoteStyle = QuoteStyle.LEGACY,
) -> Path:
    output_path = output_dir / COMMENTS_FILENAME
    write_artifact(
        output_path,
        COMMENTS_COLUMNS,
        ((r.statement_id, r.text) for r in rows),
        quote_style=quote_style,
    )
    return output_path


def write_crosswalk(
    crosswalk: Crosswalk,
    output_dir: Path,
    *,
    quote_style: QuoteStyle = QuoteStyle.LEGACY,
) -> Path:
    """Write one (pid, uid, xid) row per fully resolved participant."""
    output_path = output_dir / CROSSWALK_FILENAME
    write_artifact(output_path, CROSSWALK_COLUMNS, crosswalk.rows(), quote_style=quote_style)
    return output_path


def write_groups(
    groups: GroupMembership,
    output_dir: Path,
    *,
    quote_style: QuoteStyle = QuoteStyle.LEGACY,
) -> Path:
    output_path = output_dir / GROUPS_FILENAME
    write_artifact(
        output_path,
        GROUPS_COLUMNS,
        groups.membership.items(),
        quote_style=quote_style,
    )
    return output_path
