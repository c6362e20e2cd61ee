"""Identifier crosswalk between participant, account and external ids.

A participant (pid) is scoped to one conversation and belongs to one account
(uid); an account may carry an externally issued id (xid). The crosswalk
composes these two hops into pid -> xid.

Key relationships:
- pid -> uid comes from the conversation's participants
- uid -> xid comes from the global xids table
- pid -> xid is partial: defined only where both hops resolve

Duplicate keys are not an error: the later record overwrites the earlier one.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Literal

from .records import ExternalIdentity, Participant

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Unresolved:
    """Marker for an identifier with no crosswalk entry.

    ``namespace`` names the key that failed to resolve; ``context`` is the
    record it was reached from (a pid, a statement id, a cluster id).
    """

    namespace: Literal["pid", "uid"]
    key: int
    context: int | None = None


@dataclass(frozen=True)
class Crosswalk:
    """Lookups between the three identifier namespaces of one conversation."""

    pid_to_uid: dict[int, int] = field(default_factory=dict)
    uid_to_xid: dict[int, str] = field(default_factory=dict)
    pid_to_xid: dict[int, str] = field(default_factory=dict)
    unresolved: tuple[Unresolved, ...] = ()

    def resolve_pid(self, pid: int) -> str | Unresolved:
        """Resolve a participant id to its external id, one hop at a time."""
        uid = self.pid_to_uid.get(pid)
        if uid is None:
            return Unresolved(namespace="pid", key=pid)
        xid = self.uid_to_xid.get(uid)
        if xid is None:
            return Unresolved(namespace="uid", key=uid, context=pid)
        return xid

    def resolve_uid(self, uid: int) -> str | Unresolved:
        xid = self.uid_to_xid.get(uid)
        if xid is None:
            return Unresolved(namespace="uid", key=uid)
        return xid

    def rows(self) -> Iterator[tuple[int, int, str]]:
        """Yield (pid, uid, xid) for every fully resolved participant."""
        for pid, uid in self.pid_to_uid.items():
            xid = self.pid_to_xid.get(pid)
            if xid is not None:
                yield pid, uid, xid


def build_crosswalk(
    identities: Iterable[ExternalIdentity],
    participants: Iterable[Participant],
) -> Crosswalk:
    """
    Build the crosswalk for one conversation.

    Args:
        identities: External identity records. These are unscoped; accounts
            that never joined this conversation are simply never reached.
        participants: Participant records for a single conversation.

    Returns:
        Crosswalk whose mappings iterate in input order. Participants whose
        account has no external id are listed in ``unresolved``.
    """
    uid_to_xid: dict[int, str] = {}
    for identity in identities:
        uid_to_xid[identity.uid] = identity.xid

    pid_to_uid: dict[int, int] = {}
    for participant in participants:
        pid_to_uid[participant.pid] = participant.uid

    pid_to_xid: dict[int, str] = {}
    unresolved: list[Unresolved] = []
    for pid, uid in pid_to_uid.items():
        xid = uid_to_xid.get(uid)
        if xid is None:
            logger.debug("No external id for uid %s (pid %s)", uid, pid)
            unresolved.append(Unresolved(namespace="uid", key=uid, context=pid))
            continue
        pid_to_xid[pid] = xid

    logger.info(
        "Crosswalk: %s participants, %s resolved, %s without external id",
        f"{len(pid_to_uid):,}",
        f"{len(pid_to_xid):,}",
        f"{len(unresolved):,}",
    )

    return Crosswalk(
        pid_to_uid=pid_to_uid,
        uid_to_xid=uid_to_xid,
        pid_to_xid=pid_to_xid,
        unresolved=tuple(unresolved),
    )
