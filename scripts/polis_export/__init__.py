"""Polis conversation exporter with participant identity resolution.

This module exports one Polis conversation's votes, comments and computed
opinion groups, keyed by the external ids (xid) issued to participants.

Key relationships:
- A participant (pid) belongs to one conversation and one account (uid)
- An account may carry one external id (xid)
- Opinion-group members are listed by uid, not pid
- Votes and participants without an xid are dropped, not defaulted

Example usage:
    from scripts.polis_export import run_export

    result = run_export("postgresql://localhost/polis-dev", 12, "output/")
    print(f"Wrote {result.votes_written:,} votes")
    print(f"  {result.votes_dropped:,} dropped without external id")
"""

from .crosswalk import Crosswalk, Unresolved, build_crosswalk
from .exceptions import (
    DuplicateKeyError,
    OutputWriteError,
    PolisExportError,
    SourceReadError,
    ValidationError,
)
from .exporter import QuoteStyle, write_artifact
from .extractor import ExportResult, export_conversation, run_export
from .groups import GroupMembership, extract_group_membership
from .reconcile import (
    ReconciledVotes,
    StatementRow,
    VoteRow,
    active_authors,
    reconcile_votes,
    statement_rows,
)
from .records import (
    AnalysisPayload,
    Cluster,
    ConversationSnapshot,
    ExternalIdentity,
    Participant,
    Statement,
    User,
    Vote,
)
from .source import PolisSource
from .validators import ValidationResult

__all__ = [
    # Core functions
    "build_crosswalk",
    "reconcile_votes",
    "statement_rows",
    "active_authors",
    "extract_group_membership",
    "write_artifact",
    "export_conversation",
    "run_export",
    # Data classes
    "Crosswalk",
    "Unresolved",
    "ReconciledVotes",
    "VoteRow",
    "StatementRow",
    "GroupMembership",
    "ExportResult",
    "ValidationResult",
    "QuoteStyle",
    "PolisSource",
    # Records
    "User",
    "Participant",
    "ExternalIdentity",
    "Statement",
    "Vote",
    "Cluster",
    "AnalysisPayload",
    "ConversationSnapshot",
    # Exceptions
    "PolisExportError",
    "SourceReadError",
    "OutputWriteError",
    "ValidationError",
    "DuplicateKeyError",
]
