"""Join votes and statements against the identifier crosswalk."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from .crosswalk import Crosswalk, Unresolved
from .records import Statement, User, Vote

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VoteRow:
    """One exported vote, keyed by external id."""

    statement_id: int
    vote: int
    external_id: str


@dataclass(frozen=True)
class StatementRow:
    statement_id: int
    text: str


@dataclass(frozen=True)
class ReconciledVotes:
    """Resolved vote rows plus the votes that were dropped."""

    rows: tuple[VoteRow, ...]
    unresolved: tuple[Unresolved, ...] = ()

    @property
    def dropped_count(self) -> int:
        return len(self.unresolved)


def reconcile_votes(votes: Iterable[Vote], crosswalk: Crosswalk) -> ReconciledVotes:
    """
    Resolve each vote's participant to an external id.

    Votes from participants without an external identity (test or orphaned
    accounts) are skipped and reported in ``unresolved``; they never raise.
    Output rows keep input order.
    """
    rows: list[VoteRow] = []
    unresolved: list[Unresolved] = []

    for vote in votes:
        resolved = crosswalk.resolve_pid(vote.pid)
        if isinstance(resolved, Unresolved):
            unresolved.append(
                Unresolved(namespace=resolved.namespace, key=resolved.key, context=vote.tid)
            )
            continue
        rows.append(VoteRow(statement_id=vote.tid, vote=vote.vote, external_id=resolved))

    logger.info(
        "Votes: %s resolved, %s dropped",
        f"{len(rows):,}",
        f"{len(unresolved):,}",
    )
    return ReconciledVotes(rows=tuple(rows), unresolved=tuple(unresolved))


def statement_rows(statements: Iterable[Statement]) -> list[StatementRow]:
    """Statements export as-is; they do not depend on participant identity."""
    return [StatementRow(statement_id=s.tid, text=s.text) for s in statements]


def active_authors(users: Iterable[User], statements: Iterable[Statement]) -> list[User]:
    """Users who authored at least one statement, in user order."""
    author_uids = {s.uid for s in statements}
    return [user for user in users if user.uid in author_uids]
