"""Project computed opinion-group membership into external-id space."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .crosswalk import Crosswalk, Unresolved
from .records import AnalysisPayload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GroupMembership:
    """Mapping of external id to cluster id for one conversation.

    ``reassigned`` lists (xid, previous_cluster, new_cluster) for every
    external id seen in more than one cluster. The later cluster wins.
    """

    membership: dict[str, int] = field(default_factory=dict)
    unresolved: tuple[Unresolved, ...] = ()
    reassigned: tuple[tuple[str, int, int], ...] = ()

    def __len__(self) -> int:
        return len(self.membership)


def extract_group_membership(analysis: AnalysisPayload, crosswalk: Crosswalk) -> GroupMembership:
    """
    Assign each clustered account's external id to its cluster.

    Cluster members are account ids (uid), so they are resolved through
    ``crosswalk.uid_to_xid``; participant ids play no part here.
    Clusters and members are processed in payload order, and an external id
    found in several clusters ends up in the last one.

    Args:
        analysis: Parsed math payload for the conversation.
        crosswalk: Crosswalk built for the same conversation.

    Returns:
        GroupMembership with unresolved members and reassignments recorded.
    """
    membership: dict[str, int] = {}
    unresolved: list[Unresolved] = []
    reassigned: list[tuple[str, int, int]] = []

    for cluster in analysis.group_clusters:
        for member in cluster.members:
            resolved = crosswalk.resolve_uid(member)
            if isinstance(resolved, Unresolved):
                logger.debug("No external id for cluster %s member uid %s", cluster.id, member)
                unresolved.append(Unresolved(namespace="uid", key=member, context=cluster.id))
                continue

            previous = membership.get(resolved)
            if previous is not None and previous != cluster.id:
                logger.debug("xid %s moved from cluster %s to %s", resolved, previous, cluster.id)
                reassigned.append((resolved, previous, cluster.id))
            membership[resolved] = cluster.id

    logger.info(
        "Groups: %s clusters, %s members assigned, %s unresolved",
        len(analysis.group_clusters),
        f"{len(membership):,}",
        f"{len(unresolved):,}",
    )
    return GroupMembership(
        membership=membership,
        unresolved=tuple(unresolved),
        reassigned=tuple(reassigned),
    )
