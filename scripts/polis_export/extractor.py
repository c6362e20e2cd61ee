"""Core export logic: reconcile one conversation snapshot and write artifacts."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import duckdb

from .crosswalk import build_crosswalk
from .exporter import (
    QuoteStyle,
    write_comments,
    write_crosswalk,
    write_groups,
    write_votes,
)
from .groups import GroupMembership, extract_group_membership
from .reconcile import active_authors, reconcile_votes, statement_rows
from .records import ConversationSnapshot
from .source import PolisSource
from .validators import (
    ValidationResult,
    validate_counts,
    validate_sample,
    validate_uniqueness,
)

logger = logging.getLogger(__name__)


@dataclass
class ExportResult:
    """Result of a successful conversation export."""

    zid: int
    output_dir: Path
    votes_path: Path
    comments_path: Path
    crosswalk_path: Path
    groups_path: Path | None
    participant_count: int
    crosswalk_count: int
    vote_count: int
    votes_written: int
    votes_dropped: int
    comment_count: int
    active_author_count: int
    group_member_count: int
    group_members_unresolved: int
    validation: ValidationResult


def export_conversation(
    snapshot: ConversationSnapshot,
    output_dir: Path | str,
    *,
    quote_style: QuoteStyle = QuoteStyle.LEGACY,
    include_groups: bool = True,
    validate: bool = True,
    sample_size: int = 100,
) -> ExportResult:
    """
    Reconcile a conversation snapshot and write its artifacts.

    Artifacts are written in order (votes, comments, crosswalk, groups).
    A failed write stops the run; artifacts already written are left as is.

    Args:
        snapshot: Fully fetched conversation data.
        output_dir: Directory for the CSV artifacts (created if missing)
        quote_style: Quoting rule for text columns
        include_groups: Whether to write groups.csv
        validate: Whether to read the artifacts back and check them
        sample_size: Sample size for crosswalk validation

    Returns:
        ExportResult with counts, paths and validation results

    Raises:
        OutputWriteError: If an artifact cannot be written
        ValidationError: If validation fails
        DuplicateKeyError: If the crosswalk artifact repeats a pid
    """
    output_dir = Path(output_dir)
    logger.info("Exporting conversation %s to %s", snapshot.zid, output_dir)

    # Step 1: Reconcile
    crosswalk = build_crosswalk(snapshot.identities, snapshot.participants)
    votes = reconcile_votes(snapshot.votes, crosswalk)
    comments = statement_rows(snapshot.statements)
    authors = active_authors(snapshot.users, snapshot.statements)
    logger.info("Active authors: %s", f"{len(authors):,}")

    groups = GroupMembership()
    if include_groups and snapshot.analysis is not None:
        groups = extract_group_membership(snapshot.analysis, crosswalk)

    # Step 2: Write artifacts
    votes_path = write_votes(votes.rows, output_dir, quote_style=quote_style)
    comments_path = write_comments(comments, output_dir, quote_style=quote_style)
    crosswalk_path = write_crosswalk(crosswalk, output_dir, quote_style=quote_style)
    groups_path = None
    if include_groups:
        groups_path = write_groups(groups, output_dir, quote_style=quote_style)

    # Step 3: Validate
    validation = ValidationResult()
    if validate:
        logger.info("Validating...")
        with duckdb.connect() as conn:
            validation = validate_counts(
                votes_path,
                crosswalk_path,
                len(votes.rows),
                len(crosswalk.pid_to_xid),
                conn,
            )
            logger.info(
                "  Tier 1 (Counts): PASS (%s votes, %s crosswalk rows)",
                f"{validation.vote_count:,}",
                f"{validation.crosswalk_count:,}",
            )

            validation = validate_uniqueness(crosswalk_path, conn, validation)
            logger.info("  Tier 2 (Uniqueness): PASS")

            validation = validate_sample(
                crosswalk_path, crosswalk, conn, validation, sample_size, quote_style=quote_style
            )
            logger.info("  Tier 3 (Sample): PASS (%s rows verified)", validation.sample_size)

    return ExportResult(
        zid=snapshot.zid,
        output_dir=output_dir,
        votes_path=votes_path,
        comments_path=comments_path,
        crosswalk_path=crosswalk_path,
        groups_path=groups_path,
        participant_count=len(crosswalk.pid_to_uid),
        crosswalk_count=len(crosswalk.pid_to_xid),
        vote_count=len(snapshot.votes),
        votes_written=len(votes.rows),
        votes_dropped=votes.dropped_count,
        comment_count=len(comments),
        active_author_count=len(authors),
        group_member_count=len(groups),
        group_members_unresolved=len(groups.unresolved),
        validation=validation,
    )


def run_export(
    database_url: str,
    zid: int,
    output_dir: Path | str,
    *,
    quote_style: QuoteStyle = QuoteStyle.LEGACY,
    include_groups: bool = True,
    validate: bool = True,
    sample_size: int = 100,
) -> ExportResult:
    """
    Fetch a conversation from the database and export it.

    The snapshot is read completely before anything is written, so a read
    failure leaves no artifacts behind.

    Raises:
        SourceReadError: If any read fails
    """
    with PolisSource.connect(database_url) as source:
        snapshot = source.fetch_snapshot(zid)

    return export_conversation(
        snapshot,
        output_dir,
        quote_style=quote_style,
        include_groups=include_groups,
        validate=validate,
        sample_size=sample_size,
    )
