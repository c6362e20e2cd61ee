"""Read one conversation snapshot from a Polis PostgreSQL database."""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import psycopg
from psycopg.rows import class_row, dict_row

from .exceptions import SourceReadError
from .records import (
    AnalysisPayload,
    ConversationSnapshot,
    ExternalIdentity,
    Participant,
    Statement,
    User,
    Vote,
)
from .schema import (
    COMMENTS_QUERY,
    MATH_QUERY,
    PARTICIPANTS_QUERY,
    USERS_QUERY,
    VOTES_QUERY,
    XIDS_QUERY,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PolisSource:
    """Typed reads against the Polis schema.

    Example:
        >>> with PolisSource.connect("postgresql://localhost/polis-dev") as source:
        ...     snapshot = source.fetch_snapshot(12)
    """

    def __init__(self, conn: psycopg.Connection):
        self.conn = conn

    @classmethod
    def connect(cls, database_url: str) -> PolisSource:
        try:
            conn = psycopg.connect(database_url)
        except psycopg.Error as e:
            raise SourceReadError(message=str(e), query="connect") from e
        return cls(conn)

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> PolisSource:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _fetch_all(self, name: str, query: str, params: tuple[Any, ...], record: type[T]) -> list[T]:
        try:
            with self.conn.cursor(row_factory=class_row(record)) as cur:
                cur.execute(query, params)
                rows = cur.fetchall()
        except psycopg.Error as e:
            raise SourceReadError(message=str(e), query=name) from e

        logger.info("Read %s rows from %s", f"{len(rows):,}", name)
        return rows

    def get_active_users(self) -> list[User]:
        return self._fetch_all("users", USERS_QUERY, (), User)

    def get_participants(self, zid: int) -> list[Participant]:
        return self._fetch_all("participants", PARTICIPANTS_QUERY, (zid,), Participant)

    def get_xids(self) -> list[ExternalIdentity]:
        return self._fetch_all("xids", XIDS_QUERY, (), ExternalIdentity)

    def get_votes(self, zid: int) -> list[Vote]:
        return self._fetch_all("votes", VOTES_QUERY, (zid,), Vote)

    def get_comments(self, zid: int) -> list[Statement]:
        return self._fetch_all("comments", COMMENTS_QUERY, (zid,), Statement)

    def get_math(self, zid: int) -> AnalysisPayload:
        """
        Read the math results for a conversation.

        Raises:
            SourceReadError: If the query fails, no payload exists for the
                conversation, or the payload cannot be parsed.
        """
        try:
            with self.conn.cursor(row_factory=dict_row) as cur:
                cur.execute(MATH_QUERY, (zid,))
                row = cur.fetchone()
        except psycopg.Error as e:
            raise SourceReadError(message=str(e), query="math_main") from e

        if row is None:
            raise SourceReadError(
                message=f"No analysis payload for conversation {zid}",
                query="math_main",
            )
        return AnalysisPayload.from_json(row["data"], zid=row["zid"])

    def fetch_snapshot(self, zid: int) -> ConversationSnapshot:
        """Read everything one export run needs, before any reconciliation."""
        return ConversationSnapshot(
            zid=zid,
            users=tuple(self.get_active_users()),
            participants=tuple(self.get_participants(zid)),
            identities=tuple(self.get_xids()),
            votes=tuple(self.get_votes(zid)),
            statements=tuple(self.get_comments(zid)),
            analysis=self.get_math(zid),
        )
