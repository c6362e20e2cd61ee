"""Typed snapshot records for one Polis conversation.

Records are frozen: they are built once from a single fetch and never
mutated. Field names follow the Polis table columns so rows can be loaded
with ``psycopg.rows.class_row``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from .exceptions import SourceReadError


@dataclass(frozen=True)
class User:
    """A system-wide account."""

    uid: int
    username: str | None = None
    email: str | None = None
    site_owner: bool = False


@dataclass(frozen=True)
class Participant:
    """A conversation-scoped identity linked to one account."""

    pid: int
    uid: int
    zid: int


@dataclass(frozen=True)
class ExternalIdentity:
    """An externally issued opaque id for an account."""

    uid: int
    xid: str


@dataclass(frozen=True)
class Statement:
    """A comment submitted to a conversation."""

    tid: int
    pid: int
    zid: int
    uid: int
    text: str
    lang: str | None = None
    anon: bool = False


@dataclass(frozen=True)
class Vote:
    """A participant's reaction to a statement (-1, 0 or 1)."""

    pid: int
    zid: int
    tid: int
    vote: int
    high_priority: bool = False


@dataclass(frozen=True)
class Cluster:
    """An opinion group. Members are account ids (uid), not pids."""

    id: int
    members: tuple[int, ...]
    center: tuple[float, ...] = ()


@dataclass(frozen=True)
class SubgroupCluster(Cluster):
    parent_id: int | None = None


def _parse_cluster(raw: dict[str, Any]) -> Cluster:
    return Cluster(
        id=int(raw["id"]),
        members=tuple(int(m) for m in raw.get("members", [])),
        center=tuple(float(c) for c in raw.get("center", [])),
    )


def _parse_subgroup(raw: dict[str, Any]) -> SubgroupCluster:
    return SubgroupCluster(
        id=int(raw["id"]),
        members=tuple(int(m) for m in raw.get("members", [])),
        center=tuple(float(c) for c in raw.get("center", [])),
        parent_id=raw.get("parent-id"),
    )


@dataclass(frozen=True)
class AnalysisPayload:
    """The math results computed for a conversation.

    Only ``group_clusters`` feeds the export; the other statistics are kept
    so the payload carries every field the analysis service publishes.
    ``pca`` and ``group_votes`` stay as decoded JSON.
    """

    zid: int
    n: int = 0
    n_cmts: int = 0
    tids: tuple[int, ...] = ()
    in_conv: tuple[int, ...] = ()
    mod_in: tuple[int, ...] = ()
    mod_out: tuple[int, ...] = ()
    group_clusters: tuple[Cluster, ...] = ()
    subgroup_clusters: dict[str, tuple[SubgroupCluster, ...]] = field(default_factory=dict)
    group_votes: dict[str, Any] = field(default_factory=dict)
    pca: dict[str, Any] = field(default_factory=dict)
    user_vote_counts: dict[str, int] = field(default_factory=dict)
    comment_priorities: dict[str, float] = field(default_factory=dict)
    group_aware_consensus: dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_json(cls, data: dict[str, Any] | str | bytes, zid: int | None = None) -> AnalysisPayload:
        """
        Parse a ``math_main.data`` document.

        Args:
            data: The decoded JSON object, or its text.
            zid: Conversation id; falls back to the document's own ``zid``.

        Returns:
            AnalysisPayload with clusters in the order the document lists them.

        Raises:
            SourceReadError: If the document is not valid JSON, is not an
                object, or a field has the wrong shape.
        """
        try:
            if isinstance(data, (str, bytes)):
                data = json.loads(data)
            if zid is None:
                zid = int(data["zid"])

            return cls(
                zid=zid,
                n=int(data.get("n", 0)),
                n_cmts=int(data.get("n-cmts", 0)),
                tids=tuple(int(t) for t in data.get("tids", [])),
                in_conv=tuple(int(p) for p in data.get("in-conv", [])),
                mod_in=tuple(int(t) for t in data.get("mod-in", [])),
                mod_out=tuple(int(t) for t in data.get("mod-out", [])),
                group_clusters=tuple(_parse_cluster(c) for c in data.get("group-clusters", [])),
                subgroup_clusters={
                    key: tuple(_parse_subgroup(c) for c in clusters)
                    for key, clusters in data.get("subgroup-clusters", {}).items()
                },
                group_votes=dict(data.get("group-votes", {})),
                pca=dict(data.get("pca", {})),
                user_vote_counts=dict(data.get("user-vote-counts", {})),
                comment_priorities=dict(data.get("comment-priorities", {})),
                group_aware_consensus=dict(data.get("group-aware-consensus", {})),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise SourceReadError(
                message=f"Malformed analysis payload: {e}",
                query="math_main",
            ) from e


@dataclass(frozen=True)
class ConversationSnapshot:
    """Everything fetched for one export run."""

    zid: int
    users: tuple[User, ...] = ()
    participants: tuple[Participant, ...] = ()
    identities: tuple[ExternalIdentity, ...] = ()
    votes: tuple[Vote, ...] = ()
    statements: tuple[Statement, ...] = ()
    analysis: AnalysisPayload | None = None
