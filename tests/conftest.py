"""Shared pytest fixtures for Polis export tests."""

import pytest

from scripts.polis_export.records import (
    AnalysisPayload,
    Cluster,
    ConversationSnapshot,
    ExternalIdentity,
    Participant,
    Statement,
    User,
    Vote,
)


@pytest.fixture
def participants() -> list[Participant]:
    """Two participants in conversation 12; only the first has an xid."""
    return [
        Participant(pid=1, uid=10, zid=12),
        Participant(pid=2, uid=20, zid=12),
    ]


@pytest.fixture
def identities() -> list[ExternalIdentity]:
    """External ids, including an account from another conversation."""
    return [
        ExternalIdentity(uid=10, xid="ext-a"),
        ExternalIdentity(uid=99, xid="ext-other"),
    ]


@pytest.fixture
def votes() -> list[Vote]:
    return [
        Vote(pid=1, zid=12, tid=5, vote=1),
        Vote(pid=2, zid=12, tid=6, vote=-1),
    ]


@pytest.fixture
def statements() -> list[Statement]:
    return [
        Statement(tid=5, pid=1, zid=12, uid=10, text="More bike lanes", lang="en"),
        Statement(tid=6, pid=2, zid=12, uid=20, text="Fewer cars downtown"),
    ]


@pytest.fixture
def users() -> list[User]:
    return [
        User(uid=10, username="alice"),
        User(uid=20, email="bob@example.com"),
        User(uid=30, username="admin", site_owner=True),
    ]


@pytest.fixture
def analysis() -> AnalysisPayload:
    return AnalysisPayload(
        zid=12,
        n=2,
        group_clusters=(
            Cluster(id=0, members=(10,)),
            Cluster(id=1, members=(20,)),
        ),
    )


@pytest.fixture
def snapshot(users, participants, identities, votes, statements, analysis) -> ConversationSnapshot:
    """A complete conversation snapshot built from the fixtures above."""
    return ConversationSnapshot(
        zid=12,
        users=tuple(users),
        participants=tuple(participants),
        identities=tuple(identities),
        votes=tuple(votes),
        statements=tuple(statements),
        analysis=analysis,
    )
